import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger("cmsauth.single_flight")


class SingleFlight:
    """
    Collapses concurrent calls into one underlying operation.

    While an operation started by do() is pending, further do() calls
    await the same task instead of starting a new one. The handle is
    released as soon as the operation finishes, success or failure.
    """

    def __init__(self):
        self._pending: asyncio.Task | None = None

    @property
    def in_flight(self) -> bool:
        return self._pending is not None

    async def do(self, fn: Callable[[], Awaitable[Any]]) -> Any:
        if self._pending is not None:
            logger.debug("Operation already in flight, joining pending result")
            return await asyncio.shield(self._pending)

        self._pending = asyncio.ensure_future(self._run(fn))
        return await asyncio.shield(self._pending)

    async def _run(self, fn: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await fn()
        finally:
            self._pending = None
