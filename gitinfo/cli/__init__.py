"""Command line interface for gitinfo."""
