"""Shared pytest fixtures for all tests."""

import base64

import pytest
from fastapi.testclient import TestClient

from dropcli.config import Config
from dropserver import service_locator
from dropserver.main import app
from dropserver.repositories import MemoryPasteRepository, MemoryUploadRepository

START_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced replacement for dropserver.utils.now_ms."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture(autouse=True)
def repositories():
    """
    Install fresh in-memory repositories for every test.

    Returns:
        Tuple of (paste_repository, upload_repository)
    """
    paste_repo = MemoryPasteRepository()
    upload_repo = MemoryUploadRepository()
    service_locator.set_repositories(paste_repo, upload_repo)
    yield paste_repo, upload_repo
    service_locator.reset_repositories()


@pytest.fixture
def paste_repo(repositories):
    return repositories[0]


@pytest.fixture
def upload_repo(repositories):
    return repositories[1]


@pytest.fixture
def clock(monkeypatch):
    """
    Freeze server time; tests move it with clock.advance(ms).
    """
    fake = FakeClock()
    monkeypatch.setattr("dropserver.utils.now_ms", fake)
    return fake


@pytest.fixture
def small_limits(monkeypatch):
    """
    Shrink size limits so boundary tests stay fast.

    Returns:
        Dict of the limits in effect
    """
    limits = {
        "MAX_FILE_SIZE": 1000,
        "MAX_TOTAL_FILES_SIZE": 1500,
        "MAX_FILE_COUNT": 3,
        "CHUNK_SIZE": 300,
    }
    for name, value in limits.items():
        monkeypatch.setattr(f"dropserver.config.{name}", value)
    return limits


@pytest.fixture
def api():
    """Create FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def make_data_uri():
    """Build base64 data URIs from raw bytes."""
    def build(raw: bytes, mime_type: str = "application/octet-stream") -> str:
        return f"data:{mime_type};base64,{base64.b64encode(raw).decode('ascii')}"
    return build


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .codedrop directory
    """
    config_dir = tmp_path / '.codedrop'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance with retries disabled.

    Returns:
        Config instance with temp config file
    """
    config = Config(temp_config_dir / 'config.json')
    config.data['max_retries'] = 0
    return config


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'notes.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def multiple_sample_files(tmp_path):
    """
    Create multiple sample files for testing multi-file shares.

    Returns:
        List of Paths to sample files
    """
    files = []
    for i in range(3):
        file_path = tmp_path / f'part{i}.txt'
        file_path.write_text(f'Sample content {i}')
        files.append(file_path)
    return files
