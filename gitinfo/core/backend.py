"""Filesystem and process access used by the resolver and sidecar store."""

import io
import logging
import subprocess
from pathlib import PurePosixPath
from typing import BinaryIO, Protocol

from .errors import GitQueryError

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    """Read access to files. Handles must support ``read()`` and ``close()``."""

    def open(self, name: str) -> BinaryIO: ...


class Backend(FileSystem, Protocol):
    """File reads plus external command execution."""

    def run(self, args: list[str]) -> str: ...


class LocalBackend:
    """Backend on the local filesystem with commands run via subprocess."""

    def open(self, name: str) -> BinaryIO:
        """Open ``name`` for binary reading."""
        return open(name, "rb")

    def run(self, args: list[str]) -> str:
        """
        Run a command and return its stdout.

        Args:
            args: Command and arguments

        Returns:
            Decoded stdout

        Raises:
            GitQueryError: If the binary cannot be run or exits non-zero
        """
        logger.debug("Running: %s", " ".join(args))
        try:
            result = subprocess.run(args, capture_output=True, check=True)
        except OSError as e:
            raise GitQueryError(f"Cannot run command: {args[0]}") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            if stderr:
                logger.debug("%s: %s", args[0], stderr)
            raise GitQueryError(
                f"{' '.join(args)} exited with code {e.returncode}"
            ) from e
        # Output such as a remote URL is not guaranteed to be UTF-8
        return result.stdout.decode("utf-8", errors="replace")


class MemoryFileSystem:
    """
    Read-only filesystem backed by a mapping of names to contents.

    Suitable for sidecar data bundled into an application instead of living
    on disk. Names are normalized as POSIX paths, so ``"./a/gitinfo.json"``
    and ``"a/gitinfo.json"`` refer to the same entry.
    """

    def __init__(self, files: dict[str, bytes]):
        self.files = {self._normalize(k): v for k, v in files.items()}

    @staticmethod
    def _normalize(name: str) -> str:
        return str(PurePosixPath(name.replace("\\", "/")))

    def open(self, name: str) -> BinaryIO:
        """Open ``name`` for reading, raising FileNotFoundError if unknown."""
        try:
            data = self.files[self._normalize(name)]
        except KeyError:
            raise FileNotFoundError(name) from None
        return io.BytesIO(data)
