"""Cliente del servicio OTS (One-Time Secret).

Endpoints usados:
- `GET  /api/v1/status` -> health check previo al batch.
- `POST /api/v1/share?secret=<password>&ttl=<segundos>` (HTTP Basic auth)
  -> `{"secret_key": "..."}` con 200.

`submit` nunca lanza por fallos de red, de servicio o de parseo: devuelve un
`SubmissionResult` tipado. `check_status` sí lanza `ReachabilityError`,
porque sin servicio no se despacha nada.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import ReachabilityError
from core.domain.models import FailureKind, RemoteServiceConfig, ShareResponse, SubmissionResult
from core.interfaces.submitter import SecretSubmitter

logger = logging.getLogger(__name__)

_MAX_DETAIL_CHARS = 500


def _truncate(text: str, max_chars: int = _MAX_DETAIL_CHARS) -> str:
    s = text.strip()
    if len(s) <= max_chars:
        return s
    return s[: max_chars - 1].rstrip() + "…"


class OTSClient(SecretSubmitter):
    """Habla con un servicio OTS usando un único `httpx.AsyncClient`.

    Uso:

        async with OTSClient(config, settings) as client:
            await client.check_status()
            result = await client.submit("s3cr3t")
    """

    def __init__(
        self,
        config: RemoteServiceConfig,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._settings = settings or AppSettings()
        self._owns_client = client is None
        self._client = client or build_async_client(
            self._settings,
            auth=(config.username, config.api_key),
            transport=transport,
        )

    @property
    def config(self) -> RemoteServiceConfig:
        return self._config

    async def __aenter__(self) -> "OTSClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def check_status(self) -> str:
        """Health check. Devuelve el cuerpo de la respuesta si es 2xx."""

        url = self._config.status_url()
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise ReachabilityError(f"{url}: {exc!s} ({type(exc).__name__})") from exc

        if not response.is_success:
            raise ReachabilityError(
                f"{url} responded with HTTP {response.status_code}: {_truncate(response.text)}"
            )
        logger.info("OTS status check OK (HTTP %s)", response.status_code)
        return response.text.strip()

    async def submit(self, password: str) -> SubmissionResult:
        params = {"secret": password, "ttl": str(self._config.secret_ttl)}
        try:
            response = await self._client.post(self._config.share_url(), params=params)
        except httpx.TransportError as exc:
            logger.debug("share request failed: %s", type(exc).__name__)
            return SubmissionResult.failed(
                password,
                FailureKind.TRANSPORT,
                f"{type(exc).__name__}: {exc!s}".rstrip(": "),
            )

        if response.status_code != 200:
            return SubmissionResult.failed(
                password,
                FailureKind.SERVICE,
                _truncate(response.text),
                status_code=response.status_code,
            )

        try:
            share = ShareResponse.model_validate_json(response.content)
        except ValidationError as exc:
            return SubmissionResult.failed(
                password,
                FailureKind.PARSE,
                f"unexpected share response: {exc.errors()[0].get('msg')}",
                status_code=response.status_code,
            )

        return SubmissionResult.success(password, self._config.secret_url(share.secret_key))
