"""Configuración del Core.

Dos capas:
- `AppSettings`: comportamiento de la herramienta (timeouts, concurrencia,
  política de fallos, logging), leído de variables de entorno / `.env`.
- `RemoteServiceConfig`: credenciales y parámetros del servicio OTS, leídos
  del fichero JSON indicado con `--config`.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.errors import ConfigurationError
from core.domain.models import RemoteServiceConfig

DEFAULT_CONFIG_PATH = Path("config.json")


class AppSettings(BaseSettings):
    """Configuración central de la aplicación."""

    model_config = SettingsConfigDict(
        env_prefix="OTSGEN_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout por request contra el servicio OTS (segundos).",
    )
    user_agent: str = Field(
        default="otsgen/0.1",
        min_length=1,
        description="User-Agent para las peticiones al servicio OTS.",
    )
    max_passwords: int = Field(
        default=150,
        ge=1,
        description="Máximo de passwords aceptado por la CLI en un batch.",
    )
    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        description="Límite de envíos simultáneos. None = una tarea por password sin límite.",
    )
    fail_fast: bool = Field(
        default=False,
        description="Abortar el batch completo ante el primer envío fallido.",
    )
    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Nivel de logging (DEBUG, INFO, WARNING, ...).",
    )


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "config"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


def load_settings(**overrides: object) -> AppSettings:
    """Construye `AppSettings` desde el entorno, con overrides de la CLI.

    Raises:
        ConfigurationError: si alguna variable `OTSGEN_*` o un override no valida.
    """

    try:
        return AppSettings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(
            "Invalid OTSGEN_* settings: " + _format_validation_error(exc)
        ) from exc


def load_service_config(path: Path) -> RemoteServiceConfig:
    """Lee y valida el fichero JSON del servicio OTS.

    Raises:
        ConfigurationError: si el fichero no existe, no es JSON válido o
            le faltan campos / tienen valores inválidos.
    """

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Could not read config file {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file is not in valid JSON format: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a JSON object.")

    try:
        return RemoteServiceConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(
            "Config file does not contain valid information: " + _format_validation_error(exc)
        ) from exc


def write_service_config(path: Path, config: RemoteServiceConfig) -> Path:
    """Escribe `config` como JSON con las claves del formato de fichero."""

    path.parent.mkdir(parents=True, exist_ok=True)
    payload = config.model_dump(mode="json", by_alias=True)
    path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return path
