"""Fire-and-forget notification of the image processing pipeline."""

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({200, 202})


@dataclass(frozen=True)
class PipelineResponse:
    """Status and raw body returned by the pipeline endpoint."""

    status_code: int
    body: bytes


class PipelineClient(Protocol):
    """Interface for the processing pipeline endpoint."""

    async def submit(self, image_id: str) -> PipelineResponse:
        """Submit an image id to the pipeline."""


@dataclass
class DispatchStats:
    """Counters of completed dispatches."""

    succeeded: int = 0
    failed: int = 0


@dataclass
class PipelineDispatcher:
    """Schedules pipeline submissions without waiting for them.

    Failures are logged and counted, never raised to the caller.
    """

    client: PipelineClient
    on_complete: Callable[[str, bool], None] | None = None
    stats: DispatchStats = field(default_factory=DispatchStats)
    _pending: set[asyncio.Task[bool]] = field(
        default_factory=set, init=False, repr=False
    )

    def dispatch(self, image_id: str) -> asyncio.Task[bool]:
        """Start processing an image in the background and return at once."""
        logger.debug("Dispatching image to pipeline", extra={"image_id": image_id})
        task = asyncio.get_running_loop().create_task(self._submit(image_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending(self) -> int:
        """Number of submissions still in flight."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for in-flight submissions to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def _submit(self, image_id: str) -> bool:
        try:
            response = await self.client.submit(image_id)
        except Exception:
            logger.exception(
                "Pipeline request failed", extra={"image_id": image_id}
            )
            return self._complete(image_id, ok=False)

        if response.status_code not in SUCCESS_STATUSES:
            logger.error(
                "Status error code received from pipeline",
                extra={
                    "image_id": image_id,
                    "status_code": response.status_code,
                    "body": response.body.decode("utf-8", errors="replace"),
                },
            )
            return self._complete(image_id, ok=False)

        try:
            payload = json.loads(response.body) if response.body else None
        except ValueError:
            logger.error("Bad JSON document received from pipeline")
        else:
            logger.info(
                "Pipeline response",
                extra={"image_id": image_id, "response": payload},
            )
        return self._complete(image_id, ok=True)

    def _complete(self, image_id: str, ok: bool) -> bool:
        if ok:
            self.stats.succeeded += 1
        else:
            self.stats.failed += 1
        if self.on_complete is not None:
            try:
                self.on_complete(image_id, ok)
            except Exception:
                logger.exception("Pipeline completion hook failed")
        return ok
