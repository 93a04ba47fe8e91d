"""Temp directory lifespan event."""

import os
import tempfile
from pathlib import Path

from fileupload.core.lifespan import BaseEvent
from fileupload.core.logger import LogIcon, logger
from fileupload.services.sink import TempFileSink


class TempDirNotWritable(RuntimeError):
    """The directory receiving uploads cannot be written to."""


def resolve_temp_dir(directory: Path | str | None = None) -> Path:
    """Return the upload directory, failing when it is missing or read-only."""
    path = Path(directory) if directory else Path(tempfile.gettempdir())
    if not path.is_dir() or not os.access(path, os.W_OK | os.X_OK):
        raise TempDirNotWritable(f"Temp directory '{path}' is not writable")
    return path


class TempDirEvent(BaseEvent[Path]):
    """Checks on startup that the sink can write to its directory."""

    name = "temp_dir"

    def __init__(self, sink: TempFileSink) -> None:
        self.sink = sink

    async def startup(self) -> Path:
        path = resolve_temp_dir(self.sink.directory)
        logger.info("Uploads go to temp directory", icon=LogIcon.FOLDER, path=str(path))
        return path
