from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'pipelines.batch_orchestrator'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


CREDENTIALS = {
    "BRIGHT_USERNAME": "brd-user",
    "BRIGHT_PASSWORD": "secret",
    "BRIGHTDATA_API_TOKEN": "token-123",
    "OPENAI_API_KEY": "sk-test",
}


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def credentials_env(monkeypatch):
    for name, value in CREDENTIALS.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("LLM_TRACE", "false")
    return CREDENTIALS


@pytest.fixture
def settings(tmp_path, credentials_env):
    """Settings with credentials, temp file locations and no real waiting."""
    from config.settings import get_settings
    return dataclasses.replace(
        get_settings(),
        retry_initial_delay_seconds=0,
        retry_max_delay_seconds=0,
        snapshot_poll_interval_seconds=0,
        profile_lookup_delay_seconds=0,
        batch_size=2,
        records_per_run=4,
        input_csv=str(tmp_path / "founders.csv"),
        output_dir=str(tmp_path / "output"),
        progress_file=str(tmp_path / "progress.json"),
    )


@pytest.fixture
def write_csv(tmp_path):
    def _write(rows, name="founders.csv", header="first_name,last_name,company,email"):
        path = tmp_path / name
        lines = [header] + [",".join(r) for r in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write
