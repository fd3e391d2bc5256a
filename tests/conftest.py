"""
Pytest configuration and shared fixtures for moveitup tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pytest
import requests_mock
import yaml

from moveitup.config import Settings
from moveitup.io import ProgressReporter
from moveitup.logging import SilentLogger, set_global_logger

BASE_URL = "https://files.example.com/"
TOKEN_URL = BASE_URL + "api/v1/token"
SELF_URL = BASE_URL + "api/v1/users/self"
FILES_URL = BASE_URL + "api/v1/folders/42/files"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep MOVEIT_* variables and stray .env files out of every test."""
    for var in (
        "MOVEIT_BASE_URL",
        "MOVEIT_TIMEOUT",
        "MOVEIT_USER_AGENT",
        "MOVEIT_USERNAME",
        "MOVEIT_PASSWORD",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_global_logger():
    """The CLI installs a global logger; put the silent one back afterwards."""
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a fake server."""
    return Settings(base_url=BASE_URL, timeout=5.0)


@pytest.fixture
def progress_stream() -> io.StringIO:
    """Captures progress output."""
    return io.StringIO()


@pytest.fixture
def reporter(progress_stream: io.StringIO) -> ProgressReporter:
    return ProgressReporter(progress_stream)


@pytest.fixture
def sample_file(tmp_test_dir: Path) -> Path:
    """A 1000-byte file to upload."""
    path = tmp_test_dir / "q1.pdf"
    path.write_bytes(bytes(range(250)) * 4)
    return path


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("settings.yaml", {"timeout": 10})
    """

    def _create(filename: str, data: Any) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


class UploadSink:
    """requests-mock callback that consumes a streamed upload like a server."""

    def __init__(self, status_code: int = 201, text: str = "{}", block: int = 64):
        self.status_code = status_code
        self.text = text
        self.block = block
        self.received = b""

    def __call__(self, request, context) -> str:
        body = request.body
        self.received = b"".join(iter(lambda: body.read(self.block), b""))
        context.status_code = self.status_code
        return self.text


@pytest.fixture
def upload_sink() -> UploadSink:
    return UploadSink()


@pytest.fixture
def api(upload_sink: UploadSink):
    """
    A mocked MOVEit API answering the happy path.

    Token "abc", home folder 42, empty listing, 201 for the upload.
    Tests re-register individual endpoints to inject failures.
    """
    with requests_mock.Mocker() as m:
        m.post(TOKEN_URL, json={"access_token": "abc", "token_type": "bearer"})
        m.get(SELF_URL, json={"homeFolderID": 42, "username": "alice"})
        m.get(FILES_URL, json={"items": []})
        m.post(FILES_URL, text=upload_sink)
        yield m
