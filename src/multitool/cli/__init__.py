"""Command-line interface for multitool."""
