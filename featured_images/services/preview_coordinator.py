import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class PreviewOutcome:
    superseded: bool
    value: Any = None


class PreviewCoordinator:
    """
    One in-flight preview per session key (an editor tab, typically).

    Starting a new preview cancels the previous one for the same key; the
    superseded caller gets PreviewOutcome(superseded=True) and its result, if
    it finished anyway, is dropped.
    """

    def __init__(self) -> None:
        self._inflight: Dict[str, asyncio.Task] = {}

    def inflight(self, session_key: str) -> Optional[asyncio.Task]:
        return self._inflight.get(session_key)

    async def run(self, session_key: str, factory: Callable[[], Awaitable[Any]]) -> PreviewOutcome:
        previous = self._inflight.get(session_key)
        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.ensure_future(factory())
        self._inflight[session_key] = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if self._inflight.get(session_key) is task:
                del self._inflight[session_key]

        if task.cancelled() or _replaced(self._inflight.get(session_key), task):
            logger.debug("preview for session %s superseded", session_key)
            return PreviewOutcome(superseded=True)
        return PreviewOutcome(superseded=False, value=task.result())


def _replaced(current: Optional[asyncio.Task], task: asyncio.Task) -> bool:
    return current is not None and current is not task


preview_coordinator = PreviewCoordinator()
