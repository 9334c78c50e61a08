import json
import os
from pathlib import Path

import pytest

from chat_relay.config import RouteEntry, Settings, load_environment_from_dotenv, load_routing_table


def _write_routes(tmp_path: Path, document: object) -> str:
    path = tmp_path / "routes.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return str(path)


def _route(**overrides: str) -> dict[str, str]:
    route = {
        "model_id": "deepseek-v3",
        "display_name": "DeepSeek V3",
        "provider": "DeepSeek",
        "endpoint": "https://api.deepseek.example.com/v1/chat/completions",
        "credential_ref": "DEEPSEEK_API_KEY",
        "upstream_model": "deepseek-chat",
    }
    route.update(overrides)
    return route


def test_settings_from_env_reads_required_values(required_env: None) -> None:
    settings = Settings.from_env()

    assert settings.app_log_level == "INFO"
    assert settings.routing_table_path.endswith("routes.json")


@pytest.mark.parametrize("name", ["APP_LOG_LEVEL", "ROUTING_TABLE_PATH"])
def test_missing_required_env_raises(
    required_env: None,
    monkeypatch: pytest.MonkeyPatch,
    name: str,
) -> None:
    monkeypatch.delenv(name, raising=False)

    with pytest.raises(ValueError, match=f"Missing required environment variable: {name}"):
        Settings.from_env()


def test_blank_required_env_raises(required_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROUTING_TABLE_PATH", "   ")

    with pytest.raises(ValueError, match="ROUTING_TABLE_PATH"):
        Settings.from_env()


def test_load_routing_table_builds_immutable_entries(tmp_path: Path) -> None:
    path = _write_routes(tmp_path, {"models": [_route(), _route(model_id="deepseek-r1")]})

    routes = load_routing_table(path)

    assert list(routes) == ["deepseek-v3", "deepseek-r1"]
    assert routes["deepseek-v3"] == RouteEntry(
        model_id="deepseek-v3",
        display_name="DeepSeek V3",
        provider="DeepSeek",
        endpoint="https://api.deepseek.example.com/v1/chat/completions",
        credential_ref="DEEPSEEK_API_KEY",
        upstream_model="deepseek-chat",
    )
    with pytest.raises(TypeError):
        routes["other"] = routes["deepseek-v3"]  # type: ignore[index]


def test_load_routing_table_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="routing table file not found"):
        load_routing_table(str(tmp_path / "missing.json"))


def test_load_routing_table_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "routes.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="not valid JSON"):
        load_routing_table(str(path))


@pytest.mark.parametrize(
    "document",
    [[], {"models": []}, {"models": "deepseek-v3"}, {"routes": [_route()]}],
)
def test_load_routing_table_requires_models_list(tmp_path: Path, document: object) -> None:
    path = _write_routes(tmp_path, document)

    with pytest.raises(ValueError, match="routing table must"):
        load_routing_table(path)


def test_load_routing_table_rejects_duplicate_model_ids(tmp_path: Path) -> None:
    path = _write_routes(tmp_path, {"models": [_route(), _route()]})

    with pytest.raises(ValueError, match="duplicate model_id: deepseek-v3"):
        load_routing_table(path)


@pytest.mark.parametrize("field_name", ["endpoint", "credential_ref", "upstream_model"])
def test_load_routing_table_rejects_blank_fields(tmp_path: Path, field_name: str) -> None:
    path = _write_routes(tmp_path, {"models": [_route(**{field_name: " "})]})

    with pytest.raises(ValueError, match=f"routing table entry 0 missing {field_name}"):
        load_routing_table(path)


@pytest.mark.parametrize("endpoint", ["ANTHROPIC_ENDPOINT_HERE", "ftp://example.com/v1", "/v1/chat"])
def test_load_routing_table_rejects_non_http_endpoints(tmp_path: Path, endpoint: str) -> None:
    path = _write_routes(tmp_path, {"models": [_route(endpoint=endpoint)]})

    with pytest.raises(ValueError, match="absolute http\\(s\\) URL"):
        load_routing_table(path)


def test_load_routing_table_rejects_invalid_credential_ref(tmp_path: Path) -> None:
    path = _write_routes(tmp_path, {"models": [_route(credential_ref="sk-live-secret")]})

    with pytest.raises(ValueError, match="must be an environment variable name"):
        load_routing_table(path)


def test_shipped_routing_table_is_valid() -> None:
    routes = load_routing_table(str(Path(__file__).resolve().parents[1] / "routes.json"))

    assert "deepseek-v3" in routes
    assert routes["deepseek-v3"].upstream_model == "deepseek-chat"


def test_load_environment_from_dotenv_does_not_override_existing_env(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    dotenv_path = tmp_path / ".env"
    dotenv_path.write_text("DEEPSEEK_API_KEY=from-dotenv\n", encoding="utf-8")
    monkeypatch.setenv("DEEPSEEK_API_KEY", "from-process")

    loaded = load_environment_from_dotenv(str(dotenv_path))

    assert loaded is True
    assert os.environ["DEEPSEEK_API_KEY"] == "from-process"


def test_load_environment_from_dotenv_rejects_empty_path() -> None:
    with pytest.raises(ValueError, match="dotenv_path must not be empty"):
        load_environment_from_dotenv(" ")
