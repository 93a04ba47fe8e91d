"""Temporary file sink for uploaded file parts."""

import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO

OUT_FILE_PREFIX = "fileupload-"
OUT_FILE_SUFFIX = ".tmp"


class TempFileSink:
    """Streams byte payloads into uniquely named temporary files.

    Names are allocated by ``tempfile.mkstemp`` which creates the file
    atomically, so concurrent writers never share a path. Files are never
    removed by the sink.
    """

    __slots__ = ("directory", "prefix", "suffix")

    def __init__(
        self,
        directory: Path | str | None = None,
        prefix: str = OUT_FILE_PREFIX,
        suffix: str = OUT_FILE_SUFFIX,
    ) -> None:
        self.directory = Path(directory) if directory else None
        self.prefix = prefix
        self.suffix = suffix

    def create(self) -> tuple[int, Path]:
        """Allocate a new empty file and return its open descriptor and path."""
        fd, path = tempfile.mkstemp(prefix=self.prefix, suffix=self.suffix, dir=self.directory)
        return fd, Path(path)

    def write(self, stream: BinaryIO) -> Path:
        """Copy ``stream`` to a new temporary file. Raises OSError on failure."""
        fd, path = self.create()
        with os.fdopen(fd, "wb") as out:
            shutil.copyfileobj(stream, out)
        return path
