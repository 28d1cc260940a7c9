"""Bounded worker pool fed by a single producer through an unbounded queue.

The producer thread enqueues every job, then the main thread enqueues one
sentinel per worker. Each worker processes jobs one at a time, start to
finish, until it dequeues its sentinel. Outcomes travel back through a
second queue, so the only shared state is the two queues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
import queue
import threading
from typing import Callable, Iterable

from minimaltests.core.models import JobItem, JobOutcome, JobStatus
from minimaltests.plugins import (
    JobEndEvent,
    JobStartEvent,
    NO_PLUGINS,
    PluginManager,
)

logger = logging.getLogger(__name__)

JobHandler = Callable[[JobItem], JobOutcome]

_SENTINEL = None


def default_worker_count() -> int:
    return max(2, os.cpu_count() or 1) - 1


@dataclass(slots=True)
class PoolSummary:
    outcomes: list[JobOutcome] = field(default_factory=list)
    crashed_threads: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.crashed_threads

    def count(self, status: JobStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)


class WorkerPool:
    """Runs a job handler over independent jobs on a fixed set of threads."""

    def __init__(
        self,
        handler: JobHandler,
        *,
        num_workers: int | None = None,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        if num_workers is not None and num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")
        self.handler = handler
        self.num_workers = num_workers or default_worker_count()
        self.plugin_manager = plugin_manager if plugin_manager is not None else NO_PLUGINS

    def run(self, jobs: Iterable[JobItem]) -> PoolSummary:
        work_queue: queue.Queue[JobItem | None] = queue.Queue()
        outcome_queue: queue.Queue[JobOutcome] = queue.Queue()
        crash_queue: queue.Queue[str] = queue.Queue()

        producer = threading.Thread(
            target=self._produce,
            args=(jobs, work_queue, crash_queue),
            name="Producer",
        )
        workers = [
            threading.Thread(
                target=self._consume,
                args=(work_queue, outcome_queue, crash_queue),
                name=f"Consumer {index}",
            )
            for index in range(self.num_workers)
        ]

        producer.start()
        for worker in workers:
            worker.start()

        producer.join()
        for _ in workers:
            work_queue.put(_SENTINEL)
        for worker in workers:
            worker.join()

        summary = PoolSummary()
        while not outcome_queue.empty():
            summary.outcomes.append(outcome_queue.get_nowait())
        while not crash_queue.empty():
            summary.crashed_threads.append(crash_queue.get_nowait())
        return summary

    def _produce(
        self,
        jobs: Iterable[JobItem],
        work_queue: queue.Queue[JobItem | None],
        crash_queue: queue.Queue[str],
    ) -> None:
        try:
            for job in jobs:
                work_queue.put(job)
        except Exception:
            logger.exception("producer stopped while scheduling jobs")
            crash_queue.put(threading.current_thread().name)

    def _consume(
        self,
        work_queue: queue.Queue[JobItem | None],
        outcome_queue: queue.Queue[JobOutcome],
        crash_queue: queue.Queue[str],
    ) -> None:
        worker_name = threading.current_thread().name
        finished = False
        try:
            while True:
                job = work_queue.get()
                if job is _SENTINEL:
                    break
                outcome_queue.put(self._process(job, worker_name))
            finished = True
        finally:
            if not finished:
                crash_queue.put(worker_name)

    def _process(self, job: JobItem, worker_name: str) -> JobOutcome:
        self.plugin_manager.on_job_start(
            JobStartEvent(
                path_old=str(job.path_old),
                path_new=str(job.path_new),
                worker=worker_name,
            )
        )
        try:
            outcome = self.handler(job)
        except Exception as error:
            logger.error(
                "%s: %s for files %s %s",
                error.__class__.__name__,
                error,
                job.path_old,
                job.path_new,
            )
            outcome = JobOutcome(
                job=job,
                status="failed",
                error_type=error.__class__.__name__,
                error_message=str(error),
            )

        self.plugin_manager.on_job_end(
            JobEndEvent(
                path_old=str(job.path_old),
                path_new=str(job.path_new),
                worker=worker_name,
                status=outcome.status,
                report_path=str(outcome.report_path) if outcome.report_path else None,
                error_type=outcome.error_type,
                error_message=outcome.error_message,
            )
        )
        return outcome
