"""Latest-only execution of pipeline runs.

Input changes can arrive while a previous run is still computing. Each
key (a session, a user) keeps a generation counter; a run that finishes
after a newer one was submitted for the same key is discarded, so the
result a caller sees always reflects the latest complete input set.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class SupersededRun(Exception):
    """Raised to the caller whose run was replaced by a newer submission."""

    def __init__(self, key: str, generation: int):
        self.key = key
        self.generation = generation
        super().__init__(f"Run {generation} for {key!r} was superseded")


class LatestOnlyRunner:
    """Runs blocking callables in the default executor, keeping only the newest per key."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._generations: Dict[str, int] = {}
        self._tasks: Dict[str, asyncio.Task] = {}

    def generation(self, key: str) -> int:
        return self._generations.get(key, 0)

    async def submit(self, key: str, func: Callable[..., Any], *args: Any) -> Any:
        """
        Run `func(*args)` off the event loop for `key`.

        A pending run for the same key is cancelled; its awaiting caller
        gets SupersededRun. The executor thread itself cannot be stopped,
        so a stale result that still arrives is dropped.

        Raises:
            SupersededRun: a newer submission for `key` arrived first
            asyncio.TimeoutError: the run exceeded `timeout`
        """
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation

        previous = self._tasks.get(key)
        if previous is not None and not previous.done():
            logger.info(f"Cancelling previous run for {key!r}")
            previous.cancel()

        loop = asyncio.get_running_loop()

        async def run():
            return await loop.run_in_executor(None, func, *args)

        task = asyncio.ensure_future(run())
        self._tasks[key] = task
        try:
            if self.timeout is not None:
                result = await asyncio.wait_for(task, timeout=self.timeout)
            else:
                result = await task
        except asyncio.CancelledError:
            if self._generations.get(key) != generation:
                raise SupersededRun(key, generation)
            raise
        finally:
            if self._tasks.get(key) is task and task.done():
                del self._tasks[key]

        if self._generations.get(key) != generation:
            logger.info(f"Discarding stale result for {key!r} (generation {generation})")
            raise SupersededRun(key, generation)
        return result
