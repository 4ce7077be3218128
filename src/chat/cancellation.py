"""Cooperative cancellation for in-flight generations.

A token only requests termination. The callee decides when to observe it,
either by awaiting wait() or by checking raise_if_cancelled() between steps.
"""

import asyncio


class GenerationCancelledError(Exception):
    """Raised by a generation that observed its cancellation token."""

    pass


class CancellationToken:
    """Signal-bearing handle created per generation attempt."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation. Calling it again has no further effect."""
        self._event.set()

    async def wait(self) -> None:
        """Block until cancellation is requested."""
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelledError("Generation cancelled")
