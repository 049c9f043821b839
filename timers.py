"""
Scene timers.

Every timer is an asyncio task owned by a TimerGroup. The controller keeps one
group per scene visit and cancels the whole group on exit, so no tick from an
old visit can reach a newer one.
"""
import asyncio
from typing import Awaitable, Callable, List, Optional

from utils import get_logger

logger = get_logger(__name__)


class TimerGroup:
    """Owns the asyncio tasks started for one scene visit."""

    def __init__(self, label: str = ""):
        self.label = label
        self._tasks: List[asyncio.Task] = []

    def spawn(self, coro: Awaitable, name: Optional[str] = None) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.append(task)
        task.add_done_callback(self._forget)
        return task

    def _forget(self, task: asyncio.Task) -> None:
        if task in self._tasks:
            self._tasks.remove(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Timer task %s failed: %s", task.get_name(), task.exception())

    def cancel_all(self) -> int:
        """Cancel every live task. Returns how many were cancelled."""
        cancelled = 0
        for task in list(self._tasks):
            if not task.done():
                task.cancel()
                cancelled += 1
        self._tasks.clear()
        return cancelled

    @property
    def active(self) -> int:
        return sum(1 for t in self._tasks if not t.done())


async def run_countdown(
    seconds: int,
    on_tick: Callable[[int], None],
    on_expire: Callable[[], None],
    tick_seconds: float = 1.0,
) -> None:
    """Count down one unit per tick, stopping at zero. Expiry is not an error."""
    remaining = seconds
    while remaining > 0:
        await asyncio.sleep(tick_seconds)
        remaining -= 1
        on_tick(remaining)
    on_expire()


async def run_ticker(on_tick: Callable[[], None], tick_seconds: float = 1.0) -> None:
    """Call on_tick once per interval until cancelled."""
    while True:
        await asyncio.sleep(tick_seconds)
        on_tick()


async def run_after(delay: float, callback: Callable[[], None]) -> None:
    await asyncio.sleep(delay)
    callback()
