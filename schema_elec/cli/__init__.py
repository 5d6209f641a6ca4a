"""Command-line interface for the wiring schema generator."""
