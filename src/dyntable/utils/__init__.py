"""Utility modules for dyntable."""
