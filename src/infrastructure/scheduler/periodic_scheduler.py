"""Periodic job scheduler.

Registers named jobs with a fixed interval and runs each in its own
asyncio task. A job never overlaps itself: the next run starts one
interval after the previous run finished. Each run is wrapped in an error
boundary, so a failing job is logged and keeps its schedule while the other
jobs are unaffected.

Usage:
    scheduler = PeriodicScheduler(logger=logger)
    scheduler.register("trace_cleanup", 3600, trace_service.cleanup_old_traces)
    await scheduler.start()
    ...
    await scheduler.stop()
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from src.domain.protocols.logger_protocol import LoggerProtocol

JobFunc = Callable[[], Awaitable[Any]]


@dataclass(slots=True, kw_only=True)
class ScheduledJob:
    """A registered job.

    Attributes:
        name: Unique job name.
        interval_seconds: Delay between the end of one run and the next.
        func: Async callable with no arguments.
        run_on_start: Run once immediately when the scheduler starts.
    """

    name: str
    interval_seconds: float
    func: JobFunc
    run_on_start: bool = False


class PeriodicScheduler:
    """Runs registered jobs on fixed intervals until stopped."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger
        self._jobs: dict[str, ScheduledJob] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def job_names(self) -> list[str]:
        return list(self._jobs)

    @property
    def is_running(self) -> bool:
        return bool(self._tasks)

    def register(
        self,
        name: str,
        interval_seconds: float,
        func: JobFunc,
        *,
        run_on_start: bool = False,
    ) -> None:
        """Register a job.

        Raises:
            ValueError: If the name is taken, the interval is not positive
                or the scheduler is already running.
        """
        if name in self._jobs:
            raise ValueError(f"Job already registered: {name}")
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        if self.is_running:
            raise ValueError("Cannot register jobs while the scheduler is running")
        self._jobs[name] = ScheduledJob(
            name=name,
            interval_seconds=interval_seconds,
            func=func,
            run_on_start=run_on_start,
        )
        self._locks[name] = asyncio.Lock()

    async def start(self) -> None:
        """Start one task per registered job (idempotent)."""
        if self.is_running:
            return
        for job in self._jobs.values():
            self._tasks[job.name] = asyncio.create_task(
                self._loop(job), name=f"scheduler:{job.name}"
            )
        self._logger.info("Scheduler started", jobs=self.job_names)

    async def stop(self) -> None:
        """Cancel all job tasks and wait for them to finish."""
        if not self.is_running:
            return
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._logger.info("Scheduler stopped")

    async def run_once(self, name: str) -> bool:
        """Run a job immediately inside its error boundary.

        Waits for an in-flight run of the same job to finish first.

        Returns:
            bool: True if the run succeeded.

        Raises:
            KeyError: If no job has that name.
        """
        return await self._run(self._jobs[name])

    async def _loop(self, job: ScheduledJob) -> None:
        if job.run_on_start:
            await self._run(job)
        while True:
            await asyncio.sleep(job.interval_seconds)
            await self._run(job)

    async def _run(self, job: ScheduledJob) -> bool:
        async with self._locks[job.name]:
            try:
                await job.func()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._logger.error("Scheduled job failed", error=e, job=job.name)
                return False
            return True
