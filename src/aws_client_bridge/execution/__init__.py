"""Client construction, operation interning and error translation."""
