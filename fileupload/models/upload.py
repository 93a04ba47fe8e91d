"""Upload request, configuration and stored file models."""

import io
from dataclasses import dataclass
from typing import Any, BinaryIO

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, slots=True)
class UploadConfig:
    """Immutable upload handler configuration."""

    field_name: str
    max_size: int


@dataclass(frozen=True, slots=True)
class FilePart:
    """One file of a multipart request, as parsed by Robyn."""

    filename: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def open(self) -> BinaryIO:
        return io.BytesIO(self.content)


def _as_bytes(data: bytes | str | None) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data or b"")


@dataclass(frozen=True, slots=True)
class UploadRequest:
    """The parts of an HTTP request the upload handler needs.

    Robyn parses multipart bodies before any handler runs and exposes the
    file parts as a filename to content map, in the order they were sent.
    The raw body and the form field name of each file are not kept.
    """

    content_length: int
    content_type: str
    files: tuple[FilePart, ...] = ()

    @classmethod
    def from_request(cls, request: Any) -> "UploadRequest":
        """Build from a Robyn request, falling back to the file sizes when Content-Length is unusable."""
        files = tuple(
            FilePart(filename=name, content=_as_bytes(data)) for name, data in (request.files or {}).items()
        )

        try:
            content_length = int(request.headers.get("content-length"))
        except (TypeError, ValueError):
            content_length = sum(part.size for part in files)

        return cls(
            content_length=content_length,
            content_type=request.headers.get("content-type") or "",
            files=files,
        )


class StoredFile(BaseModel):
    """A file part persisted to a temporary file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    original_file_name: str = Field(alias="originalFileName")
    out_file_path: str = Field(alias="outFilePath")
    upload_field_name: str = Field(alias="uploadFieldName")
