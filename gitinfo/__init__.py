"""Gitinfo - git provenance metadata sidecar files."""

__version__ = "0.1.0"

from .core.metadata import RepositoryMetadata
from .core.resolver import resolve
from .core.sidecar import SidecarStore

__all__ = ["RepositoryMetadata", "SidecarStore", "resolve"]
