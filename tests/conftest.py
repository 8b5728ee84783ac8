from collections.abc import Callable
import json
from pathlib import Path

import httpx
import pytest

from adapters.ots_client import OTSClient
from core.config import AppSettings
from core.domain.models import RemoteServiceConfig

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    # No stray OTSGEN_* variables or .env file from the developer machine.
    for name in ("HTTP_TIMEOUT_SECONDS", "MAX_PASSWORDS", "MAX_CONCURRENCY", "FAIL_FAST", "LOG_LEVEL"):
        monkeypatch.delenv(f"OTSGEN_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def service_config() -> RemoteServiceConfig:
    return RemoteServiceConfig(
        endpoint="http://svc",
        username="u",
        api_key="k",
        secret_ttl=3600,
        password_length=12,
    )


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(http_timeout_seconds=10.0)


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "endpoint": "http://svc",
                "username": "u",
                "api-key": "k",
                "secret-ttl": 3600,
                "password-length": 12,
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def make_client(
    service_config: RemoteServiceConfig, settings: AppSettings
) -> Callable[[Handler], OTSClient]:
    def factory(handler: Handler) -> OTSClient:
        return OTSClient(service_config, settings, transport=httpx.MockTransport(handler))

    return factory


def _ots_handler(*, share_status: int = 200, share_body: object | None = None) -> Handler:
    """Fake OTS service: healthy status endpoint plus a configurable share endpoint."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v1/status":
            return httpx.Response(200, text="OTS is up")
        if request.url.path == "/api/v1/share" and request.method == "POST":
            if share_status != 200:
                return httpx.Response(share_status, text="internal error")
            return httpx.Response(200, json=share_body or {"secret_key": "abc123"})
        return httpx.Response(404, text="not found")

    return handler


@pytest.fixture()
def ots_handler() -> Callable[..., Handler]:
    return _ots_handler
