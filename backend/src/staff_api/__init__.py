"""Staff records API."""
