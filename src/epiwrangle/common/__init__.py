"""Shared errors and column definitions."""
