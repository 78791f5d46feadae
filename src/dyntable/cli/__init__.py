"""Command line interface for dyntable."""
