"""Git metadata resolution with fallbacks for non-repositories."""

import logging
import os
import re
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional, Union

from ..utils.paths import PathLike, is_dir_or_dir_link
from .backend import Backend, LocalBackend
from .config import GitInfoConfig
from .errors import (
    GitInfoError,
    GitQueryError,
    PathEmptyError,
    PathInvalidError,
    PathNotDirectoryError,
    TimestampDecodeError,
)
from .metadata import RepositoryMetadata

logger = logging.getLogger(__name__)

FALLBACK_VERSION_PREFIX = "v0.0.0-"
FALLBACK_VERSION_FORMAT = "%Y%m%d%H%M%S"
# Used when git has an origin entry with an empty value
UNKNOWN_REPOSITORY = "unknown"

_EPOCH_PATTERN = re.compile(r"[+-]?[0-9]+")


def local_now() -> datetime:
    """Current wall-clock time as a timezone-aware local datetime."""
    return datetime.now().astimezone()


def synthesize_version(now: datetime) -> str:
    """
    Build the fallback version string for ``now``.

    Examples:
        >>> synthesize_version(datetime(2024, 5, 1, 12, 30, 5, tzinfo=timezone.utc))
        'v0.0.0-20240501123005'
    """
    return FALLBACK_VERSION_PREFIX + now.astimezone(timezone.utc).strftime(
        FALLBACK_VERSION_FORMAT
    )


def mk_time(raw: Union[str, bytes]) -> datetime:
    """
    Convert ``git show -s --format=format:%ct`` output to a datetime.

    Args:
        raw: Epoch seconds as base-10 text

    Returns:
        Timezone-aware datetime in local time

    Raises:
        TimestampDecodeError: If the input is not a base-10 integer
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode("ascii")
        except UnicodeDecodeError as e:
            raise TimestampDecodeError(f"Invalid commit timestamp: {raw!r}") from e
    else:
        text = raw
    text = text.strip()
    if not _EPOCH_PATTERN.fullmatch(text):
        raise TimestampDecodeError(f"Invalid commit timestamp: {raw!r}")
    try:
        return datetime.fromtimestamp(int(text), tz=timezone.utc).astimezone()
    except (OverflowError, OSError, ValueError) as e:
        raise TimestampDecodeError(f"Commit timestamp out of range: {text}") from e


def validate_path(path: str) -> None:
    """
    Check ``path`` is a usable directory.

    Raises:
        PathEmptyError: If path is empty
        PathInvalidError: If path does not exist, cannot be inspected
            or contains a NUL byte
        PathNotDirectoryError: If path is not a directory or link to one
    """
    if not path:
        raise PathEmptyError("Path must not be empty")
    try:
        is_dir = is_dir_or_dir_link(path)
    except (OSError, ValueError) as e:
        raise PathInvalidError(f"Path is not available: {path!r}") from e
    if not is_dir:
        raise PathNotDirectoryError(f"Path must be a directory: {path}")


class MetadataResolver:
    """
    Resolves RepositoryMetadata for a directory.

    Each of the three git queries may fail independently; a failure is
    logged and replaced by its fallback so that a repository without tags
    still reports its origin URL and commit time. Only an invalid path is
    raised to the caller.
    """

    def __init__(
        self,
        config: Optional[GitInfoConfig] = None,
        backend: Optional[Backend] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize resolver.

        Args:
            config: Settings; probed for git here unless already probed
            backend: Command runner (default: LocalBackend)
            clock: Source of the current time for fallbacks (default: local_now)
        """
        self.config = (config or GitInfoConfig()).probed()
        self.backend = backend or LocalBackend()
        self.clock = clock or local_now

    def _git(self, path: str, *args: str) -> str:
        out = self.backend.run([self.config.git_bin, "-C", path, *args])
        return out.rstrip("\r\n")

    def _version(self, path: str) -> str:
        out = self._git(path, "describe", "--tags", "--always")
        if not out:
            raise GitQueryError(f"git describe returned nothing for {path}")
        return out

    def _repository(self, path: str) -> str:
        out = self._git(path, "config", "--get", "remote.origin.url")
        return out or UNKNOWN_REPOSITORY

    def _modified(self, path: str) -> datetime:
        return mk_time(self._git(path, "show", "-s", "--format=format:%ct", "HEAD"))

    def version(self, path: PathLike) -> str:
        """
        Return the tag description of the working copy.

        Raises:
            GitQueryError: If ``git describe`` fails
        """
        return self._version(self.config.join_root(os.fspath(path)))

    def repository(self, path: PathLike) -> str:
        """
        Return the remote origin URL of the working copy.

        Raises:
            GitQueryError: If no origin is configured or path is not a repo
        """
        return self._repository(self.config.join_root(os.fspath(path)))

    def modified(self, path: PathLike) -> datetime:
        """
        Return the commit time of HEAD.

        Raises:
            GitQueryError: If there is no commit
            TimestampDecodeError: If git output is not epoch seconds
        """
        return self._modified(self.config.join_root(os.fspath(path)))

    def resolve(self, path: PathLike) -> RepositoryMetadata:
        """
        Build metadata for ``path`` from git, falling back per field.

        Args:
            path: Working copy directory (joined onto config.root if set)

        Returns:
            Fully populated RepositoryMetadata

        Raises:
            PathInvalidError: If path is empty, missing or not a directory
        """
        path = self.config.join_root(os.fspath(path))
        validate_path(path)
        now = self.clock()

        repository = None
        if self.config.use_git:
            try:
                repository = self._repository(path)
            except GitInfoError as e:
                logger.debug("No origin for %s: %s", path, e)

        if repository is None:
            logger.info("git is not available for %s", path)
            return RepositoryMetadata(
                version=synthesize_version(now),
                repository="file://" + os.path.abspath(path),
                modified=now,
            )

        try:
            version = self._version(path)
        except GitInfoError as e:
            # Repo has no tags (or no commits), generate own
            logger.info("repo tag not found for %s", path)
            logger.debug("%s", e)
            version = synthesize_version(now)

        try:
            modified = self._modified(path)
        except GitInfoError as e:
            logger.info("set modified = now for %s", path)
            logger.debug("%s", e)
            modified = now

        return RepositoryMetadata(
            version=version, repository=repository, modified=modified
        )


def resolve(
    path: PathLike,
    config: Optional[GitInfoConfig] = None,
    backend: Optional[Backend] = None,
) -> RepositoryMetadata:
    """Resolve metadata for ``path`` with a one-off resolver."""
    return MetadataResolver(config, backend).resolve(path)
