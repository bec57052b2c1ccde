"""Repository metadata schema and serialization for gitinfo sidecar files."""

from datetime import datetime
from typing import Union

import yaml
from pydantic import BaseModel, Field, field_validator


class RepositoryMetadata(BaseModel):
    """Provenance metadata of a working copy.

    Example sidecar content::

        {
          "version": "v0.33-1-g4f4575a",
          "repository": "https://github.com/pgmig-sql/pgmig.git",
          "modified": "2019-12-24T02:44:51+03:00"
        }
    """

    version: str = Field(
        ..., min_length=1, description="Tag description or v0.0.0-<timestamp>"
    )
    repository: str = Field(
        ..., min_length=1, description="Remote origin URL or file:// path"
    )
    modified: datetime = Field(
        ..., description="Last commit time or resolution time (RFC 3339)"
    )

    @field_validator("modified")
    @classmethod
    def validate_modified_is_aware(cls, v: datetime) -> datetime:
        """Attach the local timezone to naive timestamps."""
        if v.tzinfo is None:
            return v.astimezone()
        return v

    def to_json(self, indent: int = 2) -> str:
        """
        Serialize metadata to JSON string.

        Args:
            indent: JSON indentation level

        Returns:
            JSON string representation (no trailing newline)
        """
        return self.model_dump_json(indent=indent)

    def to_yaml(self) -> str:
        """Serialize metadata to YAML string."""
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_json(cls, json_str: Union[str, bytes]) -> "RepositoryMetadata":
        """
        Deserialize metadata from JSON string.

        Args:
            json_str: JSON string to parse

        Returns:
            RepositoryMetadata instance

        Raises:
            pydantic.ValidationError: If JSON is malformed or fields are missing
        """
        return cls.model_validate_json(json_str)
