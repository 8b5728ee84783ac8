"""Wrapper de httpx.

Un único sitio donde se fijan timeout, headers y autenticación para el
cliente que habla con el servicio OTS.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings

DEFAULT_KEEPALIVE_CONNECTIONS = 20


def build_async_client(
    settings: AppSettings | None = None,
    *,
    auth: tuple[str, str] | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults de la herramienta.

    - `auth` se envía como HTTP Basic en cada request.
    - `transport` permite inyectar un `httpx.MockTransport` en tests.
    - El pool de conexiones solo se limita si `max_concurrency` está fijado;
      sin él, cada envío del batch tiene su propia conexión.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json, text/plain;q=0.9, */*;q=0.8",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        auth=httpx.BasicAuth(*auth) if auth else None,
        limits=httpx.Limits(
            max_connections=settings.max_concurrency,
            max_keepalive_connections=settings.max_concurrency or DEFAULT_KEEPALIVE_CONNECTIONS,
        ),
        transport=transport,
    )
