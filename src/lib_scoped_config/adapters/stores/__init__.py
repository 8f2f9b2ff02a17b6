"""Backing store engines."""
