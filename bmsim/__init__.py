"""bmsim – building management model with a line-oriented save-file format."""

__version__ = "0.1.0"
