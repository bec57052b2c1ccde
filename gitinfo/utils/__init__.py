"""Utility functions for gitinfo."""
