"""Health check endpoint."""

from pydantic import BaseModel

from fileupload.core.logger import LogIcon, logger
from fileupload.core.router import Router
from fileupload.core.settings import UploadSettings
from fileupload.core.settings import settings as st


class HealthResponse(BaseModel):
    """Health check response with the active upload options."""

    status: str
    service: str
    version: str
    upload_path: str
    field_name: str
    max_size: int


def create_health_router(upload_settings: UploadSettings) -> Router:
    router = Router(__file__, prefix="/")

    @router.get("/health")
    async def health_check() -> HealthResponse:
        logger.info("Health check requested", icon=LogIcon.HEALTHCHECK)
        return HealthResponse(
            status="healthy",
            service=st.API_NAME,
            version=st.API_VERSION,
            upload_path=f"/{upload_settings.UPLOAD_PATH}",
            field_name=upload_settings.UPLOAD_PARAM_NAME,
            max_size=upload_settings.UPLOAD_MAX_FILE_SIZE,
        )

    return router
