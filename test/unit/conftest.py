"""Test fixtures for robyn-file-upload unit tests."""

import uuid
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from robyn.robyn import Headers, QueryParams, Request, Url

from fileupload.core.lifespan import State
from fileupload.models.upload import FilePart, UploadConfig, UploadRequest
from fileupload.services.sink import TempFileSink


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request, keys stored lowercase."""

    _data: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._data = {key.lower(): value for key, value in self._data.items()}

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key.lower(), default)

    def set(self, key: str, value: str) -> None:
        self._data[key.lower()] = value


@dataclass
class MockUrl:
    path: str = "/"


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: bytes | str = b""
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "POST"
    url: MockUrl = field(default_factory=MockUrl)
    ip_addr: str | None = "127.0.0.1"
    form_data: dict = field(default_factory=dict)
    files: dict = field(default_factory=dict)


# -----------------------------------------------------------------------------
# Multipart helpers
# -----------------------------------------------------------------------------


def multipart_content_type() -> str:
    return f"multipart/form-data; boundary=test-{uuid.uuid4().hex}"


def robyn_request(
    files: dict[str, bytes] | None = None,
    headers: dict[str, str] | None = None,
    form_data: dict[str, str] | None = None,
    path: str = "/",
) -> Request:
    """Build a real Robyn request the way its multipart parser fills one.

    The body is the concatenated file contents, ``files`` maps file names to
    bytes and ``form_data`` holds the plain fields.
    """
    files = files or {}
    body = b"".join(files.values())
    return Request(
        QueryParams(),
        Headers(headers or {}),
        {},
        body,
        "POST",
        Url("http", "testclient", path),
        form_data or {},
        files,
        None,
        "127.0.0.1",
    )


def make_upload(
    files: list[tuple[str, bytes]],
    content_length: int | None = None,
    content_type: str | None = None,
) -> UploadRequest:
    parts = tuple(FilePart(filename=name, content=content) for name, content in files)
    return UploadRequest(
        content_length=sum(part.size for part in parts) if content_length is None else content_length,
        content_type=multipart_content_type() if content_type is None else content_type,
        files=parts,
    )


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def test_state() -> State:
    """Create a test state container."""
    return State()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    """Isolated directory standing in for the system temp directory."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def sink(upload_dir: Path) -> TempFileSink:
    return TempFileSink(directory=upload_dir)


@pytest.fixture
def upload_config() -> UploadConfig:
    return UploadConfig(field_name="testfiles", max_size=50 * 1024 * 1024)


@pytest.fixture
def make_mock_request():
    """Factory fixture to create mock Robyn requests."""

    def _make(
        body: bytes | str = b"",
        headers: dict | None = None,
        path: str = "/",
        files: dict | None = None,
    ) -> MockRequest:
        return MockRequest(body=body, headers=MockHeaders(headers or {}), url=MockUrl(path=path), files=files or {})

    return _make
