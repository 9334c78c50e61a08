"""Shared pytest configuration for the project."""

import json
from pathlib import Path
import sys

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))


TEST_ROUTES = [
    {
        "model_id": "deepseek-v3",
        "display_name": "DeepSeek V3",
        "provider": "DeepSeek",
        "endpoint": "https://api.deepseek.example.com/v1/chat/completions",
        "credential_ref": "DEEPSEEK_API_KEY",
        "upstream_model": "deepseek-chat",
    },
    {
        "model_id": "gemini-2.0",
        "display_name": "Gemini 2.0",
        "provider": "Gemini",
        "endpoint": "https://gemini.example.com/v1/chat/completions",
        "credential_ref": "GEMINI_API_KEY",
        "upstream_model": "gemini-2.0-flash",
    },
]


@pytest.fixture
def routing_table_file(tmp_path: Path) -> Path:
    path = tmp_path / "routes.json"
    path.write_text(json.dumps({"models": TEST_ROUTES}), encoding="utf-8")
    return path


@pytest.fixture
def required_env(
    monkeypatch: pytest.MonkeyPatch,
    routing_table_file: Path,
    tmp_path: Path,
) -> None:
    # create_app reads .env from the working directory.
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("APP_LOG_LEVEL", "INFO")
    monkeypatch.setenv("ROUTING_TABLE_PATH", str(routing_table_file))
    monkeypatch.setenv("DEEPSEEK_API_KEY", "test-deepseek-key")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
