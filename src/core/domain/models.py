"""Modelos del dominio (Pydantic v2).

Aquí viven las estructuras de datos puras del generador: la configuración del
servicio OTS, la respuesta tipada del endpoint de share y los resultados de
cada envío y del batch completo.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, StrictStr, field_validator
from pydantic.config import ConfigDict


class RemoteServiceConfig(BaseModel):
    """Conexión al servicio OTS tal como viene en el fichero `config.json`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    endpoint: str = Field(
        ...,
        min_length=1,
        description="URL base del servicio OTS (sin `/` final).",
    )
    username: str = Field(
        ...,
        min_length=1,
        description="Usuario para HTTP Basic auth.",
    )
    api_key: str = Field(
        ...,
        min_length=1,
        alias="api-key",
        description="API key usada como password en HTTP Basic auth.",
    )
    secret_ttl: int = Field(
        ...,
        gt=0,
        strict=True,
        alias="secret-ttl",
        description="Tiempo de vida del secreto en el servicio (segundos).",
    )
    password_length: int = Field(
        ...,
        gt=0,
        strict=True,
        alias="password-length",
        description="Longitud de cada password generado.",
    )

    @field_validator("endpoint")
    @classmethod
    def _normalize_endpoint(cls, value: str) -> str:
        endpoint = value.strip().rstrip("/")
        if not endpoint.startswith(("http://", "https://")):
            raise ValueError("endpoint must start with http:// or https://")
        return endpoint

    @field_validator("username", "api_key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    def share_url(self) -> str:
        return f"{self.endpoint}/api/v1/share"

    def status_url(self) -> str:
        return f"{self.endpoint}/api/v1/status"

    def secret_url(self, secret_key: str) -> str:
        return f"{self.endpoint}/secret/{secret_key}"


class ShareResponse(BaseModel):
    """Cuerpo JSON de un `POST /api/v1/share` exitoso."""

    model_config = ConfigDict(extra="ignore")

    secret_key: StrictStr = Field(
        ...,
        min_length=1,
        description="Identificador emitido por el servicio para el secreto.",
    )


class FailureKind(str, Enum):
    """Why a single submission did not produce a retrieval URL."""

    TRANSPORT = "transport"
    SERVICE = "service"
    PARSE = "parse"

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return {
            FailureKind.TRANSPORT: "Transport error",
            FailureKind.SERVICE: "Service error",
            FailureKind.PARSE: "Parse error",
        }[self]


class SubmissionResult(BaseModel):
    """Resultado de enviar un password al servicio (éxito o fallo tipado)."""

    password: str = Field(..., description="Password generado y enviado.")
    url: str | None = Field(
        default=None,
        description="URL de recuperación (solo en éxito).",
    )
    failure: FailureKind | None = Field(
        default=None,
        description="Tipo de fallo (solo si no hay URL).",
    )
    detail: str | None = Field(
        default=None,
        description="Diagnóstico legible: cuerpo de la respuesta o error de red.",
    )
    status_code: int | None = Field(
        default=None,
        description="Status HTTP recibido, si hubo respuesta.",
    )

    @classmethod
    def success(cls, password: str, url: str) -> "SubmissionResult":
        return cls(password=password, url=url, status_code=200)

    @classmethod
    def failed(
        cls,
        password: str,
        failure: FailureKind,
        detail: str,
        *,
        status_code: int | None = None,
    ) -> "SubmissionResult":
        return cls(password=password, failure=failure, detail=detail, status_code=status_code)

    @property
    def ok(self) -> bool:
        return self.failure is None and self.url is not None

    def line(self) -> str:
        if self.ok:
            return f"{self.password} -> {self.url}"
        kind = self.failure.label() if self.failure else "Unknown error"
        status = f" (HTTP {self.status_code})" if self.status_code is not None else ""
        return f"{kind}{status}: {self.detail or ''}".rstrip()


class RunOutcome(BaseModel):
    """Agregado del batch: todos los resultados más la duración total."""

    requested: int = Field(..., ge=0, description="Unidades despachadas.")
    results: list[SubmissionResult] = Field(
        default_factory=list,
        description="Resultados en orden de finalización.",
    )
    elapsed_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Desde el inicio del despacho hasta el último resultado drenado.",
    )

    @property
    def succeeded(self) -> list[SubmissionResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[SubmissionResult]:
        return [r for r in self.results if not r.ok]

    @property
    def complete(self) -> bool:
        return len(self.results) == self.requested
