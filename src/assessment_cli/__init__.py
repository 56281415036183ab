"""Command-line entry point for the assessment engine."""
