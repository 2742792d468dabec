"""
Cancellable delayed tasks.

Every piece of simulated latency (gateway confirmation, review delays)
runs as a named ``asyncio.Task`` owned by a ``TaskScheduler``.  Keys are
namespaced by driver (``"{driver_id}:..."``) so tearing down a session can
cancel everything it scheduled before a stale callback fires.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[None]]


class TaskScheduler:
    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task] = {}

    def schedule(self, key: str, delay: float, callback: Callback) -> asyncio.Task:
        """Run *callback* after *delay* seconds, replacing any task under *key*."""
        self.cancel(key)
        task = asyncio.create_task(self._run(key, delay, callback), name=key)
        self._tasks[key] = task
        return task

    def cancel(self, key: str) -> bool:
        task = self._tasks.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def cancel_prefix(self, prefix: str) -> int:
        keys = [k for k in self._tasks if k.startswith(prefix)]
        return sum(self.cancel(k) for k in keys)

    def pending(self) -> list[str]:
        return [k for k, t in self._tasks.items() if not t.done()]

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            logger.info("Cancelled %d scheduled task(s)", len(tasks))

    async def _run(self, key: str, delay: float, callback: Callback) -> None:
        try:
            await asyncio.sleep(delay)
            await callback()
        except asyncio.CancelledError:
            logger.debug("Scheduled task %s cancelled", key)
            raise
        except Exception:
            logger.exception("Scheduled task %s failed", key)
        finally:
            if self._tasks.get(key) is asyncio.current_task():
                del self._tasks[key]
