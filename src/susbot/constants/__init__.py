"""Shared constants for Susbot."""
