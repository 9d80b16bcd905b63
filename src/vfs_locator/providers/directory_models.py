"""Pydantic models for the directory provider."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DirectoryProviderConfig(BaseModel):
    """Configuration for DirectoryProvider."""

    model_config = ConfigDict(frozen=True)

    fs_type: str = Field(default="dir", min_length=1, description="File system type")
    roots: dict[str, Path] = Field(
        default_factory=dict, description="Instance id -> local root directory"
    )

    @field_validator("roots")
    @classmethod
    def check_ids(cls, roots: dict[str, Path]) -> dict[str, Path]:
        """Instance ids must be non-empty and usable as a URI host"""
        for fs_id in roots:
            if not fs_id or any(c in fs_id for c in "/?#@: "):
                raise ValueError(f"Invalid file system id: {fs_id!r}")
        return roots
