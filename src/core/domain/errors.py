"""Errores del dominio.

Los fallos de envío individuales no son excepciones: viajan como
`SubmissionResult` tipados. Las excepciones quedan para lo que corta la
ejecución antes o durante el batch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.domain.models import RunOutcome, SubmissionResult


class OTSGenError(Exception):
    """Base for every error raised by otsgen."""


class ConfigurationError(OTSGenError):
    """The service config file is missing, not JSON, or has invalid fields."""


class ReachabilityError(OTSGenError):
    """The OTS health check failed; nothing must be dispatched."""


class BatchAbortedError(OTSGenError):
    """A fail-fast batch stopped at its first failed submission."""

    def __init__(self, failure: SubmissionResult, outcome: RunOutcome) -> None:
        super().__init__(failure.line())
        self.failure = failure
        self.outcome = outcome
