"""Domain primitives: exceptions, interfaces and numeric sanitizing."""
