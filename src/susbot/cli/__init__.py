"""Command-line interface for Susbot."""
