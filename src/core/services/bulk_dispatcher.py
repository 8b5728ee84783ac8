"""Bulk generation orchestration.

`BulkDispatcher` runs one asyncio task per password: generate, submit, and
hand the `SubmissionResult` back through `asyncio.as_completed`, so callers
see results in completion order. The batch is over only when every
dispatched unit has reported (or the fail-fast policy aborted it).

Side-effects (printing, progress) stay out of here; the CLI plugs in through
the `on_result` callback.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import nullcontext
from typing import Callable

from core.domain.errors import BatchAbortedError
from core.domain.models import RunOutcome, SubmissionResult
from core.interfaces.submitter import SecretSubmitter
from core.services.password_generator import PasswordGenerator

logger = logging.getLogger(__name__)

ResultCallback = Callable[[SubmissionResult], None]


class BulkDispatcher:
    """Generates and submits passwords concurrently.

    Args:
        submitter: where each password is registered.
        generator: password source, shared by all units.
        password_length: length of every generated password.
        max_concurrency: optional cap on simultaneous submissions. ``None``
            runs every unit as its own task with no pool limit.
        fail_fast: stop the whole batch at the first failed submission and
            raise `BatchAbortedError` instead of reporting it as a result.
    """

    def __init__(
        self,
        *,
        submitter: SecretSubmitter,
        generator: PasswordGenerator,
        password_length: int,
        max_concurrency: int | None = None,
        fail_fast: bool = False,
    ) -> None:
        if password_length <= 0:
            raise ValueError(f"password_length must be positive, got {password_length}")
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._submitter = submitter
        self._generator = generator
        self._password_length = password_length
        self._max_concurrency = max_concurrency
        self._fail_fast = fail_fast

    async def run_batch(self, count: int, *, on_result: ResultCallback | None = None) -> RunOutcome:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")

        start = time.perf_counter()
        if count == 0:
            return RunOutcome(requested=0, results=[], elapsed_seconds=time.perf_counter() - start)

        sem = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None

        async def unit() -> SubmissionResult:
            password = self._generator.generate(self._password_length)
            async with sem if sem is not None else nullcontext():
                return await self._submitter.submit(password)

        logger.info(
            "dispatching %d units (max_concurrency=%s, fail_fast=%s)",
            count,
            self._max_concurrency,
            self._fail_fast,
        )
        tasks = [asyncio.create_task(unit()) for _ in range(count)]
        results: list[SubmissionResult] = []
        try:
            for next_done in asyncio.as_completed(tasks):
                result = await next_done
                results.append(result)
                if not result.ok:
                    logger.warning(
                        "submission failed: %s (status=%s)",
                        result.failure.value if result.failure else "unknown",
                        result.status_code,
                    )
                if on_result:
                    on_result(result)
                if self._fail_fast and not result.ok:
                    outcome = RunOutcome(
                        requested=count,
                        results=results,
                        elapsed_seconds=time.perf_counter() - start,
                    )
                    raise BatchAbortedError(result, outcome)
        finally:
            # Every exit path cancels and reaps whatever is still in flight.
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                logger.info("cancelling %d outstanding submissions", len(pending))
                await asyncio.gather(*pending, return_exceptions=True)

        elapsed = time.perf_counter() - start
        logger.info("batch finished: %d results in %.2fs", len(results), elapsed)
        return RunOutcome(requested=count, results=results, elapsed_seconds=elapsed)
