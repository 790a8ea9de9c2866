"""A small typed client family standing in for a real service SDK."""
