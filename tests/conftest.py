from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from deadlines.settings import reset_settings_cache  # noqa: E402

_ENV_KEYS = (
    "DEADLINES_SOURCE",
    "DEADLINES_ROOT_DIR",
    "DEADLINES_FILE_EXTENSION",
    "GITHUB_API_BASE",
    "GITHUB_REF",
    "GITHUB_TOKEN",
    "HTTP_MAX_ATTEMPTS",
    "HTTP_RETRY_BACKOFF_SECONDS",
    "FETCH_CONCURRENCY",
    "DUPLICATE_POLICY",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep a developer .env out of the test run
    monkeypatch.chdir(tmp_path)
    reset_settings_cache()
    yield
    reset_settings_cache()
