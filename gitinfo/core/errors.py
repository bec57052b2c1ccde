"""Gitinfo exception hierarchy.

All public exceptions inherit from GitInfoError. Path, write and read errors
reach the caller; git query errors are absorbed by the resolver and replaced
with fallback values.
"""


class GitInfoError(Exception):
    """Base exception for all gitinfo errors."""


class PathInvalidError(GitInfoError):
    """Raised when the target path is missing or unusable."""


class PathEmptyError(PathInvalidError):
    """Raised when an empty path is given."""


class PathNotDirectoryError(PathInvalidError):
    """Raised when the target path is not a directory or a link to one."""


class GitQueryError(GitInfoError):
    """Raised when a git subcommand cannot be run or exits non-zero."""


class TimestampDecodeError(GitInfoError, ValueError):
    """Raised when commit time output is not a base-10 integer."""


class SidecarWriteError(GitInfoError):
    """Raised when the sidecar file cannot be created or written."""


class FileUnreadableError(GitInfoError):
    """Raised when the sidecar file cannot be opened or read."""


class ParseError(GitInfoError):
    """Raised when the sidecar file holds malformed JSON or a bad schema."""
