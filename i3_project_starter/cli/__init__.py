"""Command-line interface for i3start."""
