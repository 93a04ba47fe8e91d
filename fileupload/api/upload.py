"""File upload endpoint."""

import asyncio

from robyn import Response, status_codes

from fileupload.core.router import Router, json_response
from fileupload.models.upload import UploadConfig, UploadRequest
from fileupload.services.sink import TempFileSink
from fileupload.services.upload import UploadHandler


def create_upload_router(upload_path: str, config: UploadConfig, sink: TempFileSink | None = None) -> Router:
    """Create the router serving ``POST /<upload_path>``."""
    router = Router(__file__, prefix="/")
    handler = UploadHandler(config, sink)

    @router.post(f"/{upload_path}")
    async def upload_files(upload: UploadRequest) -> Response:
        """Store uploaded files in the temp directory and describe where they went."""
        records = await asyncio.to_thread(handler.handle, upload)
        return json_response(records, status_code=status_codes.HTTP_201_CREATED)

    return router
