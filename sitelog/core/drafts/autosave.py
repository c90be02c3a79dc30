import asyncio
from collections.abc import Callable

from sitelog.common.logging import get_logger

logger = get_logger("drafts.autosave")


class AutosaveTimer:
    """Calls ``callback`` every ``interval`` seconds until stopped.

    Purely time-triggered. Each timer owns its task, so two controllers never
    share one. A failing tick is logged and the timer keeps running.
    """

    def __init__(self, interval: float, callback: Callable[[], object]) -> None:
        if interval <= 0:
            raise ValueError("Autosave interval must be positive")
        self.interval = interval
        self._callback = callback
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Autosave started (every %.1fs)", self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Autosave stopped after %d tick(s)", self.ticks)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.ticks += 1
            try:
                self._callback()
            except Exception as e:
                logger.warning("Autosave tick failed: %s", e)
