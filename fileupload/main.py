"""robyn-file-upload - stores multipart uploads in the temp directory, powered by Robyn."""

import os
from collections.abc import Sequence

from robyn import Robyn

from fileupload.api.health import create_health_router
from fileupload.api.upload import create_upload_router
from fileupload.cli import parse_settings
from fileupload.core.lifespan import create_lifespan
from fileupload.core.logger import LogIcon, logger
from fileupload.core.settings import UploadSettings
from fileupload.core.settings import settings as st
from fileupload.events.temp_dir import TempDirEvent
from fileupload.middlewares.access_log import AccessLogMiddleware
from fileupload.middlewares.base import MiddlewareHandler
from fileupload.middlewares.openapi import UploadOpenAPIMiddleware
from fileupload.services.sink import TempFileSink

PAYLOAD_LIMIT_ENV = "ROBYN_MAX_PAYLOAD_SIZE"
PAYLOAD_HEADROOM = 1024 * 1024


def configure_payload_limit(max_size: int) -> int:
    """Let Robyn read bodies slightly over ``max_size`` so the upload handler reports them.

    An explicit ROBYN_MAX_PAYLOAD_SIZE in the environment wins.
    """
    os.environ.setdefault(PAYLOAD_LIMIT_ENV, str(max(max_size, 0) + PAYLOAD_HEADROOM))
    return int(os.environ[PAYLOAD_LIMIT_ENV])


def create_app(upload_settings: UploadSettings, sink: TempFileSink | None = None) -> Robyn:
    """Assemble the Robyn app for the given upload options."""
    app = Robyn(__file__)
    sink = sink or TempFileSink()

    # Lifespan events
    lifespan = create_lifespan(app)
    lifespan.register(TempDirEvent(sink))

    app.startup_handler(lifespan.startup)
    app.shutdown_handler(lifespan.shutdown)

    # Routers
    app.include_router(create_health_router(upload_settings))
    app.include_router(
        create_upload_router(upload_settings.UPLOAD_PATH, upload_settings.upload_config, sink)
    )

    # Middlewares
    middlewares = MiddlewareHandler(app)
    middlewares.register(AccessLogMiddleware())
    middlewares.register(UploadOpenAPIMiddleware(upload_settings.UPLOAD_PARAM_NAME))

    return app


def main(argv: Sequence[str] | None = None) -> None:
    upload_settings = parse_settings(argv)
    payload_limit = configure_payload_limit(upload_settings.UPLOAD_MAX_FILE_SIZE)
    app = create_app(upload_settings)
    logger.info(
        f"Starting {st.API_NAME}",
        icon=LogIcon.START,
        host=st.API_HOST,
        port=upload_settings.APP_PORT,
        upload_path=f"/{upload_settings.UPLOAD_PATH}",
        field_name=upload_settings.UPLOAD_PARAM_NAME,
        max_size=upload_settings.UPLOAD_MAX_FILE_SIZE,
        payload_limit=payload_limit,
    )
    app.start(host=st.API_HOST, port=upload_settings.APP_PORT)


if __name__ == "__main__":
    main()
