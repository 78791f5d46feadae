"""Core engine wiring for dyntable."""
