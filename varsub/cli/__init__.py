"""Command-line interface for varsub."""
