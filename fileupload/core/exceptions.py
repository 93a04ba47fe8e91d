"""API error taxonomy mapped to HTTP status codes."""

from robyn import status_codes


class APIError(Exception):
    """Base error surfaced to the client as an HTTP response."""

    status_code: int = status_codes.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "detail": self.message}


class RequestTooLarge(APIError):
    """Declared content length is above the configured limit."""

    status_code = status_codes.HTTP_400_BAD_REQUEST
    code = "request_too_large"


class UnsupportedMediaType(APIError):
    """Request is not multipart/form-data.

    Reported as 500 for compatibility with existing clients.
    """

    code = "unsupported_media_type"


class MalformedRequest(APIError):
    """Multipart body could not be parsed."""

    code = "malformed_request"


class NoFilesProvided(APIError):
    """No file parts under the configured field."""

    status_code = status_codes.HTTP_400_BAD_REQUEST
    code = "no_files_provided"


class FileWriteError(APIError):
    """A file part could not be written to disk."""

    code = "file_write_error"
