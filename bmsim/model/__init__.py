"""In-memory building model: sensors, rooms, floors and buildings."""
