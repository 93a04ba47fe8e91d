"""Command line options for the upload service."""

import argparse
from collections.abc import Sequence

from pydantic import ValidationError

from fileupload.core.settings import DEFAULT_MAX_FILE_SIZE, UploadSettings
from fileupload.core.settings import settings as st

# settings field -> (option, env var)
OPTIONS: dict[str, tuple[str, str]] = {
    "APP_PORT": ("--http-port", "FU_APP_PORT"),
    "UPLOAD_PATH": ("--upload-path", "FU_UPLOAD_PATH"),
    "UPLOAD_PARAM_NAME": ("--field-name", "FU_UPLOAD_PARAM_NAME"),
    "UPLOAD_MAX_FILE_SIZE": ("--max-size", "FU_UPLOAD_MAX_FILE_SIZE"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fileupload",
        description="Uploads file to temporary directory via POST request",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {st.API_VERSION}")
    parser.add_argument(
        "-p", "--http-port", dest="APP_PORT", type=int,
        help="HTTP port to bind (default: 8080, ENV var: FU_APP_PORT)",
    )
    parser.add_argument(
        "-u", "--upload-path", dest="UPLOAD_PATH",
        help="POST request handler path (default: 'upload', ENV var: FU_UPLOAD_PATH)",
    )
    parser.add_argument(
        "-f", "--field-name", dest="UPLOAD_PARAM_NAME",
        help="Upload request file field name (default: 'files', ENV var: FU_UPLOAD_PARAM_NAME)",
    )
    parser.add_argument(
        "-m", "--max-size", dest="UPLOAD_MAX_FILE_SIZE", type=int,
        help=f"Upload request max size in bytes (default: {DEFAULT_MAX_FILE_SIZE}, ENV var: FU_UPLOAD_MAX_FILE_SIZE)",
    )
    return parser


def describe_errors(error: ValidationError) -> str:
    """One line per invalid option, naming the flag and its env var."""
    lines = []
    for err in error.errors():
        field_name = str(err["loc"][0]) if err["loc"] else ""
        option, env_var = OPTIONS.get(field_name, (field_name, ""))
        lines.append(f"Invalid value '{err.get('input')}' for option '{option}' ({env_var}): {err['msg']}")
    return "; ".join(lines)


def parse_settings(argv: Sequence[str] | None = None) -> UploadSettings:
    """Merge CLI options over FU_* env vars and defaults. Exits with status 2 on invalid values."""
    parser = build_parser()
    args = parser.parse_args(argv)
    overrides = {name: value for name, value in vars(args).items() if value is not None}
    try:
        return UploadSettings(**overrides)
    except ValidationError as ex:
        parser.error(describe_errors(ex))
