"""Structural outlines for Bible passages."""
