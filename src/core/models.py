# src/core/models.py - v3
"""Shared Pydantic domain models used across modules.

BuildRecord is a closed union of three frozen record types discriminated by
``kind``. No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

import posixpath
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

AssetKind = Literal["static", "processed", "bundled"]


# === FILESYSTEM ===


class FileStat(BaseModel):
    """Metadata for one filesystem entry, as reported by the path resolver."""

    model_config = ConfigDict(frozen=True)

    exists: bool = True
    is_directory: bool = False
    is_file: bool = True
    size: int = 0
    mtime: float = 0.0


# === PROCESSING ===


class ProcessorResult(BaseModel):
    """Output of running a processor chain over one file."""

    data: str
    required_paths: list[str] = Field(default_factory=list)
    stubbed_paths: list[str] = Field(default_factory=list)
    dependency_paths: list[str] = Field(default_factory=list)


# === BUILD RECORDS ===


class _RecordBase(BaseModel):
    """Fields shared by every build record."""

    model_config = ConfigDict(frozen=True)

    id: str
    filename: str
    logical_path: str
    content_type: str
    length: int
    digest: str
    dependency_paths: tuple[str, ...]
    dependency_digest: str
    mtime: int

    @property
    def digest_path(self) -> str:
        """Logical path with the digest spliced in before the extension.

        ``app/main.js`` with digest ``ab12`` becomes ``app/main-ab12.js``.
        """
        root, ext = posixpath.splitext(self.logical_path)
        return f"{root}-{self.digest}{ext}"


class StaticRecord(_RecordBase):
    """A file with no applicable processors, passed through as binary."""

    kind: Literal["static"] = "static"
    source: None = None
    required_paths: tuple[str, ...] = ()
    stubbed_paths: tuple[str, ...] = ()


class ProcessedRecord(_RecordBase):
    """A single file run once through its processor chain."""

    kind: Literal["processed"] = "processed"
    source: str
    required_paths: tuple[str, ...]
    stubbed_paths: tuple[str, ...] = ()


class BundledRecord(_RecordBase):
    """A file concatenated with its required dependencies."""

    kind: Literal["bundled"] = "bundled"
    source: str
    required_paths: tuple[str, ...]
    stubbed_paths: tuple[str, ...] = ()


BuildRecord = Annotated[
    Union[StaticRecord, ProcessedRecord, BundledRecord],
    Field(discriminator="kind"),
]
