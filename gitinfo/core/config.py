"""Runtime configuration for gitinfo."""

import logging
import shutil
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "gitinfo.json"
DEFAULT_GIT_BIN = "git"


class GitInfoConfig(BaseModel):
    """Settings shared by the resolver, the sidecar store and the CLI."""

    debug: bool = Field(default=False, description="Show debug data")
    file: str = Field(default=DEFAULT_FILENAME, description="Sidecar filename")
    git_bin: str = Field(default=DEFAULT_GIT_BIN, description="Git binary name")
    # Set when paths are relative to a fixed tree (e.g. an embedded one)
    root: str = Field(default="", description="Prefix joined onto every path")
    use_git: Optional[bool] = Field(
        None, description="Whether git is usable (None until probed)"
    )

    @field_validator("file")
    @classmethod
    def validate_file_is_name(cls, v: str) -> str:
        """Validate the sidecar filename is a non-empty bare name."""
        if not v or v in (".", ".."):
            raise ValueError(f"Sidecar filename must be a file name: {v!r}")
        if Path(v).name != v:
            raise ValueError(f"Sidecar filename must not contain directories: {v}")
        return v

    @field_validator("git_bin")
    @classmethod
    def validate_git_bin(cls, v: str) -> str:
        """Validate git binary name is not empty."""
        if not v.strip():
            raise ValueError("Git binary name must not be empty")
        return v

    def probed(self) -> "GitInfoConfig":
        """
        Return a copy with ``use_git`` resolved.

        The lookup runs only when ``use_git`` is still unset, so a config
        probed at startup can be passed around without repeating it.
        """
        if self.use_git is not None:
            return self
        found = shutil.which(self.git_bin)
        if found is None:
            logger.warning("No git binary found: %s", self.git_bin)
        else:
            logger.debug("Using git binary: %s", found)
        return self.model_copy(update={"use_git": found is not None})

    def join_root(self, path: str) -> str:
        """Join ``path`` onto the configured root, if any."""
        if self.root:
            return str(Path(self.root) / path)
        return path
