"""Task manager lifecycle — start, stop, schedule.

The ``TaskManager`` owns a set of ``CronJob`` definitions and runs each on
its own asyncio task. A job sleeps ``period`` seconds between runs; a failing
run is logged and the loop carries on with the next period.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sol_dashboard.metrics.collector import EngineMetrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CronJob:
    """A recurring background job."""

    handler: Callable[[], Awaitable[object]]
    period: float  # seconds
    name: str = ""


class TaskManager:
    """Manages asyncio-based cron jobs.

    Usage::

        tm = TaskManager(metrics=engine_metrics)
        tm.register("reconcile", CronJob(handler=..., period=30))
        await tm.start()
        ...
        await tm.stop()
    """

    def __init__(self, *, metrics: EngineMetrics | None = None) -> None:
        self._jobs: dict[str, CronJob] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._running = False
        self._metrics = metrics

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def jobs(self) -> dict[str, CronJob]:
        """Registered jobs (name → CronJob)."""
        return dict(self._jobs)

    def register(self, name: str, job: CronJob) -> None:
        """Register a cron job; starts it at once if the manager is running.

        Raises:
            ValueError: If *name* is already registered.
        """
        if name in self._jobs:
            msg = f"Cron job {name!r} already registered"
            raise ValueError(msg)
        resolved = CronJob(handler=job.handler, period=job.period, name=name)
        self._jobs[name] = resolved
        if self._running:
            self._tasks[name] = asyncio.create_task(self._run_loop(resolved), name=name)

    async def start(self) -> None:
        """Start all registered cron jobs."""
        if self._running:
            return
        self._running = True
        for name, job in self._jobs.items():
            self._tasks[name] = asyncio.create_task(self._run_loop(job), name=name)
        logger.info("TaskManager started with %d jobs", len(self._jobs))

    async def stop(self) -> None:
        """Cancel all running jobs and wait for them to finish."""
        if not self._running:
            return
        self._running = False
        for task in self._tasks.values():
            task.cancel()
        results = await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        for r in results:
            if isinstance(r, Exception) and not isinstance(r, asyncio.CancelledError):
                logger.error("Task error during shutdown: %s", r)
        self._tasks.clear()
        logger.info("TaskManager stopped")

    async def run_once(self, name: str) -> None:
        """Execute the job registered under *name* immediately.

        Raises:
            KeyError: If no such job is registered.
        """
        await self._execute(self._jobs[name])

    async def _execute(self, job: CronJob) -> None:
        if self._metrics is not None:
            with self._metrics.track_cron(job.name):
                await job.handler()
        else:
            await job.handler()

    async def _run_loop(self, job: CronJob) -> None:
        while self._running:
            try:
                await asyncio.sleep(job.period)
                if not self._running:
                    break
                await self._execute(job)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Cron job %r failed", job.name)
