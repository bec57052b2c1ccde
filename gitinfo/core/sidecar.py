"""Reading and writing of the gitinfo.json sidecar file."""

import logging
import os
from contextlib import closing
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..utils.paths import PathLike
from .backend import Backend, FileSystem, LocalBackend
from .config import GitInfoConfig
from .errors import (
    FileUnreadableError,
    GitInfoError,
    ParseError,
    SidecarWriteError,
)
from .metadata import RepositoryMetadata
from .resolver import MetadataResolver

logger = logging.getLogger(__name__)


class SidecarStore:
    """
    Stores RepositoryMetadata as ``<dir>/<config.file>``.

    Writes go to the local filesystem. Reads go through a FileSystem
    (the store's backend unless one is passed), so the sidecar can also be
    read from bundled data. A passed FileSystem is addressed by ``path``
    as given; ``config.root`` only applies on the local filesystem.
    """

    def __init__(
        self,
        config: Optional[GitInfoConfig] = None,
        backend: Optional[Backend] = None,
        resolver: Optional[MetadataResolver] = None,
    ):
        """
        Initialize sidecar store.

        Args:
            config: Settings (sidecar filename, root, git binary)
            backend: File and command access (default: LocalBackend)
            resolver: Resolver used when metadata must be derived from git;
                its config is used, so it cannot be combined with ``config``

        Raises:
            ValueError: If both config and resolver are given
        """
        if config is not None and resolver is not None:
            raise ValueError("Pass either config or resolver, not both")
        self.backend = backend or LocalBackend()
        self.resolver = resolver or MetadataResolver(config, self.backend)
        self.config = self.resolver.config

    def sidecar_path(self, path: PathLike) -> Path:
        """Return the sidecar file location for directory ``path``."""
        return Path(self.config.join_root(os.fspath(path))) / self.config.file

    def exists(self, path: PathLike) -> bool:
        """Check whether the sidecar file already exists on disk."""
        return self.sidecar_path(path).is_file()

    def write(
        self, path: PathLike, metadata: Optional[RepositoryMetadata] = None
    ) -> Path:
        """
        Write metadata to the sidecar file, resolving it first if not given.

        The file is created or truncated; there is no locking.

        Args:
            path: Directory to write into
            metadata: Metadata to store (default: resolved from ``path``)

        Returns:
            Path of the written file

        Raises:
            PathInvalidError: If metadata must be resolved and path is invalid
            SidecarWriteError: If the file cannot be written
        """
        if metadata is None:
            logger.debug("Fetching git metadata for %s", path)
            metadata = self.resolver.resolve(path)

        target = self.sidecar_path(path)
        logger.debug("Write gitinfo: %s", target)
        try:
            with open(target, "w", encoding="utf-8", newline="\n") as f:
                f.write(metadata.to_json() + "\n")
        except OSError as e:
            raise SidecarWriteError(f"Cannot write gitinfo file: {target}") from e
        return target

    def read(
        self, path: PathLike, fs: Optional[FileSystem] = None
    ) -> RepositoryMetadata:
        """
        Read metadata from the sidecar file.

        Args:
            path: Directory holding the sidecar file
            fs: Filesystem to open the file with, addressed without
                config.root (default: the store's backend, rooted)

        Returns:
            Parsed RepositoryMetadata

        Raises:
            FileUnreadableError: If the file cannot be opened or read
            ParseError: If the content is not valid metadata JSON
        """
        if fs is None:
            fs = self.backend
            name = str(self.sidecar_path(path))
        else:
            name = str(Path(os.fspath(path)) / self.config.file)
        try:
            with closing(fs.open(name)) as f:
                data = f.read()
        except OSError as e:
            raise FileUnreadableError(f"Cannot read gitinfo file: {name}") from e

        try:
            return RepositoryMetadata.from_json(data)
        except ValidationError as e:
            raise ParseError(f"Cannot parse gitinfo file: {name}") from e

    def read_or_make(
        self, path: PathLike, fs: Optional[FileSystem] = None
    ) -> RepositoryMetadata:
        """
        Read metadata from the sidecar file or derive it from git.

        Raises:
            PathInvalidError: If the file is unusable and path is invalid
        """
        try:
            return self.read(path, fs)
        except GitInfoError as e:
            logger.debug("%s; resolving from source", e)
            return self.resolver.resolve(path)
