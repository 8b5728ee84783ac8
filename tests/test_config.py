import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import AppSettings, load_service_config, load_settings, write_service_config
from core.domain.errors import ConfigurationError
from core.domain.models import RemoteServiceConfig


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_service_config_reads_file_keys(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "config.json",
        {
            "endpoint": "https://ots.example.com/",
            "username": "ops",
            "api-key": "secret",
            "secret-ttl": 600,
            "password-length": 20,
        },
    )

    config = load_service_config(path)

    assert config.endpoint == "https://ots.example.com"
    assert config.username == "ops"
    assert config.api_key == "secret"
    assert config.secret_ttl == 600
    assert config.password_length == 20
    assert config.share_url() == "https://ots.example.com/api/v1/share"
    assert config.secret_url("abc") == "https://ots.example.com/secret/abc"


def test_missing_file_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Could not read config file"):
        load_service_config(tmp_path / "nope.json")


def test_invalid_json_is_a_configuration_error(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="valid JSON"):
        load_service_config(path)


def test_non_object_json_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="JSON object"):
        load_service_config(_write(tmp_path / "config.json", ["a", "b"]))


@pytest.mark.parametrize(
    "overrides",
    [
        {"username": ""},
        {"api-key": "   "},
        {"endpoint": "ftp://svc"},
        {"secret-ttl": 0},
        {"password-length": -4},
        {"secret-ttl": "3600"},
        {"password-length": True},
        {"password-length": 12.5},
    ],
)
def test_invalid_fields_are_configuration_errors(tmp_path: Path, overrides: dict[str, object]) -> None:
    payload = {
        "endpoint": "http://svc",
        "username": "u",
        "api-key": "k",
        "secret-ttl": 3600,
        "password-length": 12,
    }
    payload.update(overrides)

    with pytest.raises(ConfigurationError, match="does not contain valid information"):
        load_service_config(_write(tmp_path / "config.json", payload))


def test_missing_field_is_reported_by_name(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", {"endpoint": "http://svc", "username": "u"})

    with pytest.raises(ConfigurationError, match="api-key"):
        load_service_config(path)


def test_write_service_config_uses_file_keys(tmp_path: Path, service_config: RemoteServiceConfig) -> None:
    path = write_service_config(tmp_path / "nested" / "config.json", service_config)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["api-key"] == "k"
    assert data["secret-ttl"] == 3600
    assert load_service_config(path) == service_config


def test_config_is_immutable(service_config: RemoteServiceConfig) -> None:
    with pytest.raises(ValidationError):
        service_config.username = "other"  # type: ignore[misc]


def test_settings_defaults() -> None:
    settings = AppSettings()

    assert settings.http_timeout_seconds == 10.0
    assert settings.max_passwords == 150
    assert settings.max_concurrency is None
    assert settings.fail_fast is False


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OTSGEN_MAX_CONCURRENCY", "5")
    monkeypatch.setenv("OTSGEN_FAIL_FAST", "true")

    settings = AppSettings()

    assert settings.max_concurrency == 5
    assert settings.fail_fast is True


def test_settings_from_dotenv_file(isolated_env: Path) -> None:
    (isolated_env / ".env").write_text("OTSGEN_HTTP_TIMEOUT_SECONDS=2.5\n", encoding="utf-8")

    assert AppSettings().http_timeout_seconds == 2.5


def test_load_settings_applies_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OTSGEN_FAIL_FAST", "true")

    settings = load_settings(fail_fast=False, max_concurrency=3)

    assert settings.fail_fast is False
    assert settings.max_concurrency == 3


def test_invalid_environment_is_a_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OTSGEN_MAX_CONCURRENCY", "0")

    with pytest.raises(ConfigurationError, match="max_concurrency"):
        load_settings()
