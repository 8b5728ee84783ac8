"""Contrato del emisor de secretos.

`BulkDispatcher` solo necesita "algo que envíe un password y devuelva un
`SubmissionResult`". El cliente HTTP real (`adapters.ots_client.OTSClient`)
lo implementa, y los tests pueden sustituirlo por un fake con latencia
controlada.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import SubmissionResult


@runtime_checkable
class SecretSubmitter(Protocol):
    """Contrato mínimo para registrar un password como secreto de un solo uso.

    Reglas:
    - `submit` es asíncrono porque hace I/O (HTTP).
    - Nunca lanza por fallos de red/servicio/parseo: los devuelve tipados.
    """

    async def submit(self, password: str) -> SubmissionResult:
        """Registra `password` y devuelve el resultado normalizado."""

        ...
