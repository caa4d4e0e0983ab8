"""In-process interval scheduler for recurring background jobs.

A single driver loop wakes every ``tick_seconds`` and starts each idle task
whose interval has elapsed since its last run. Tasks are fired as separate
asyncio tasks, so a slow task never delays the driver or other tasks. A
task that is still running when its next slot comes up is skipped for that
tick; nothing is queued.

Registrations live only in memory and are lost on restart.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

TaskFunction = Callable[[], Awaitable[None]]


@dataclass
class ScheduledTask:
    id: str
    interval: float  # seconds
    fn: TaskFunction
    last_run: float
    is_running: bool = False


class TaskScheduler:
    """Runs named async callables no more often than once per interval.

    A task becomes due once ``interval`` seconds have passed since its last
    run, and is started on the first tick after that, so the delay past the
    nominal interval is at most one tick. ``last_run`` is stamped when a run
    finishes, whether it succeeded or raised; failed runs wait a full
    interval like any other.
    """

    def __init__(
        self,
        tick_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        self._tick_seconds = tick_seconds
        self._clock = clock
        self._tasks: dict[str, ScheduledTask] = {}
        self._inflight: set[asyncio.Task[None]] = set()
        self._driver: asyncio.Task[None] | None = None

    @property
    def tasks(self) -> dict[str, ScheduledTask]:
        return dict(self._tasks)

    @property
    def running(self) -> bool:
        return self._driver is not None and not self._driver.done()

    def schedule_task(self, task_id: str, interval_minutes: float, fn: TaskFunction) -> None:
        """Register ``fn`` to run every ``interval_minutes``.

        Re-registering an id replaces the previous entry and restarts its
        interval from now.
        """
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        self._tasks[task_id] = ScheduledTask(
            id=task_id,
            interval=interval_minutes * 60,
            fn=fn,
            last_run=self._clock(),
        )
        logger.info("Scheduled task %r to run every %s minutes", task_id, interval_minutes)

    def remove_task(self, task_id: str) -> None:
        if self._tasks.pop(task_id, None) is not None:
            logger.info("Removed scheduled task %r", task_id)

    def check_tasks(self) -> list[asyncio.Task[None]]:
        """Run one tick: start every idle task that is due.

        Must be called from a running event loop.

        Returns:
            The asyncio tasks started during this tick.
        """
        now = self._clock()
        started: list[asyncio.Task[None]] = []

        for task in list(self._tasks.values()):
            if task.is_running:
                continue
            if now - task.last_run < task.interval:
                continue

            task.is_running = True
            runner = asyncio.create_task(self._run(task), name=f"scheduled:{task.id}")
            self._inflight.add(runner)
            runner.add_done_callback(self._inflight.discard)
            started.append(runner)

        return started

    async def _run(self, task: ScheduledTask) -> None:
        logger.info("Running scheduled task %r", task.id)
        try:
            await task.fn()
        except Exception:
            logger.exception("Error running scheduled task %r", task.id)
        finally:
            task.last_run = self._clock()
            task.is_running = False

    async def _drive(self) -> None:
        while True:
            await asyncio.sleep(self._tick_seconds)
            self.check_tasks()

    def start(self) -> None:
        """Start the driver loop on the current event loop."""
        if self.running:
            return
        self._driver = asyncio.create_task(self._drive(), name="scheduler-driver")
        logger.info("Scheduler started (tick every %ss)", self._tick_seconds)

    async def stop(self) -> None:
        """Stop ticking, cancel in-flight runs, and clear the registry."""
        if self._driver is not None:
            self._driver.cancel()
            try:
                await self._driver
            except asyncio.CancelledError:
                pass
            self._driver = None

        inflight = list(self._inflight)
        for runner in inflight:
            runner.cancel()
        if inflight:
            await asyncio.gather(*inflight, return_exceptions=True)

        self._tasks.clear()
        logger.info("Scheduler stopped")
