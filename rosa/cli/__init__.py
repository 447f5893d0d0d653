"""Command-line interface for Rosa."""
