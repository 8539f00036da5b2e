import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Keep the module-level app in src.api.main away from the working directory.
_scratch = tempfile.mkdtemp(prefix="timetable-tests-")
os.environ.setdefault("DATA_FILE", os.path.join(_scratch, "data", "timetable.json"))
os.environ.setdefault("PUBLIC_DIR", os.path.join(_scratch, "public"))

from src.api.core.settings import Settings  # noqa: E402
from src.api.main import create_app  # noqa: E402


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "host": "127.0.0.1",
        "port": 5000,
        "data_file": str(tmp_path / "data" / "timetable.json"),
        "public_dir": str(tmp_path / "public"),
        "cors_allow_origins": ["*"],
        "max_body_bytes": 50 * 1024 * 1024,
        "log_level": "INFO",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)
