"""Conversion between generic data and typed model objects."""
