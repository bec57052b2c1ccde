"""Core resolution and sidecar storage for gitinfo."""
