"""Reading and writing the colon-delimited building save file."""
