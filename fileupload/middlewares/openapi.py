"""OpenAPI patch documenting upload endpoints as multipart/form-data."""

import orjson
from robyn import Request, Response

from fileupload.core.logger import LogIcon, logger
from fileupload.core.router import UPLOAD_ENDPOINTS
from fileupload.middlewares.base import BaseMiddleware


def upload_request_body(field_name: str) -> dict:
    """OpenAPI requestBody for a list of files under ``field_name``."""
    return {
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        field_name: {
                            "type": "array",
                            "items": {"type": "string", "format": "binary"},
                            "description": "Files to upload",
                        }
                    },
                    "required": [field_name],
                }
            }
        },
        "required": True,
    }


UPLOAD_RESPONSES = {
    "201": {
        "description": "Stored files",
        "content": {
            "application/json": {
                "schema": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "originalFileName": {"type": "string"},
                            "outFilePath": {"type": "string"},
                            "uploadFieldName": {"type": "string"},
                        },
                    },
                }
            }
        },
    },
    "400": {"description": "Request too large or no files in the upload field"},
    "500": {"description": "Not multipart, malformed body or write failure"},
}


class UploadOpenAPIMiddleware(BaseMiddleware):
    """Patches the OpenAPI document so upload endpoints show their multipart body."""

    endpoints = frozenset(["/openapi.json"])

    def __init__(self, field_name: str) -> None:
        super().__init__()
        self.field_name = field_name

    def before(self, request: Request) -> Request:
        return request

    def after(self, request: Request, response: Response) -> Response:
        if not UPLOAD_ENDPOINTS:
            return response

        try:
            spec = orjson.loads(response.description)
        except orjson.JSONDecodeError as ex:
            logger.warning("OpenAPI document is not JSON, left unpatched", icon=LogIcon.WARNING, reason=str(ex))
            return response

        paths = spec.get("paths", {})
        for endpoint in UPLOAD_ENDPOINTS:
            for operation in paths.get(endpoint, {}).values():
                operation["requestBody"] = upload_request_body(self.field_name)
                operation["responses"] = UPLOAD_RESPONSES

        response.description = orjson.dumps(spec).decode()
        return response
