"""Upload handler: validates a multipart request and stores its file parts."""

from multipart import parse_options_header

from fileupload.core.exceptions import (
    FileWriteError,
    MalformedRequest,
    NoFilesProvided,
    RequestTooLarge,
    UnsupportedMediaType,
)
from fileupload.core.logger import LogIcon, logger
from fileupload.models.upload import FilePart, StoredFile, UploadConfig, UploadRequest
from fileupload.services.sink import TempFileSink

MULTIPART_FORM_DATA = "multipart/form-data"


def is_multipart(content_type: str) -> bool:
    mime, _ = parse_options_header(content_type)
    return mime == MULTIPART_FORM_DATA


def has_boundary(content_type: str) -> bool:
    _, options = parse_options_header(content_type)
    return bool(options.get("boundary"))


class UploadHandler:
    """Stores every non-empty file part of a request in its own temporary file.

    Robyn drops the form field name of file parts, so every file it delivers
    is attributed to the configured upload field. Holds only immutable
    configuration, so one instance serves concurrent requests. Failures are
    logged and raised as APIError subclasses; files written before a failure
    are kept.
    """

    def __init__(self, config: UploadConfig, sink: TempFileSink | None = None) -> None:
        self.config = config
        self.sink = sink or TempFileSink()

    def handle(self, request: UploadRequest) -> list[StoredFile]:
        field_name = self.config.field_name
        logger.info("Request content length", icon=LogIcon.UPLOAD, content_length=request.content_length)

        if request.content_length > self.config.max_size:
            msg = f"Request size is too big '{request.content_length}' (max size: '{self.config.max_size}')"
            logger.error(msg, icon=LogIcon.ERROR)
            raise RequestTooLarge(msg)

        if not is_multipart(request.content_type):
            msg = "Invalid request content type, should be 'multipart/form-data'"
            logger.error(msg, icon=LogIcon.ERROR, content_type=request.content_type)
            raise UnsupportedMediaType(msg)

        if not has_boundary(request.content_type):
            logger.error("Malformed request", icon=LogIcon.ERROR, reason="no boundary in content type")
            raise MalformedRequest("Malformed request")

        if not request.files:
            msg = f"No files found in '{field_name}' field"
            logger.error(msg, icon=LogIcon.ERROR)
            raise NoFilesProvided(msg)

        logger.info("Files in upload field", icon=LogIcon.PROCESSING, field=field_name, total=len(request.files))
        return [record for part in request.files if (record := self._store(part)) is not None]

    def _store(self, part: FilePart) -> StoredFile | None:
        """Write one part to disk, or return None for an empty part."""
        logger.info("Processing file", icon=LogIcon.FILE, file_name=part.filename, size=part.size)
        if part.size == 0:
            logger.info("Uploaded file is empty, skipping", icon=LogIcon.SKIP, file_name=part.filename)
            return None

        try:
            out_path = self.sink.write(part.open())
        except (OSError, ValueError) as ex:
            msg = f"Error while processing '{part.filename}' file"
            logger.exception(msg, icon=LogIcon.ERROR)
            raise FileWriteError(msg) from ex

        logger.info("File written", icon=LogIcon.SUCCESS, file_name=part.filename, path=str(out_path))
        return StoredFile(
            original_file_name=part.filename,
            out_file_path=str(out_path),
            upload_field_name=self.config.field_name,
        )
