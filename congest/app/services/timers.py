"""
Timer subsystem backed by APScheduler.

Each registered service owns exactly one :class:`TimerHandle`.  The
handle is the only way the registry controls a job: it arms it, pauses
and resumes it, and removes it on deregistration.  One-shot jobs are
discarded by APScheduler after they fire; the handle reports them as
``inert`` and treats further stop/cancel calls as no-ops.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Optional, Sequence
from uuid import uuid4

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from .timing import FiringRule, OneShot, Repeating

logger = logging.getLogger(__name__)

ARMED = "armed"
INVOKING = "invoking"
INERT = "inert"
STOPPED = "stopped"


def create_scheduler(timezone: str = "UTC", max_workers: int = 10) -> BackgroundScheduler:
    """Build an unstarted background scheduler."""
    return BackgroundScheduler(
        timezone=timezone,
        executors={"default": ThreadPoolExecutor(max_workers)},
        job_defaults={
            # A late one-shot still fires once instead of being dropped.
            "misfire_grace_time": None,
            "coalesce": True,
            "max_instances": 1,
        },
    )


def build_trigger(rule: FiringRule):
    """Return the APScheduler trigger that executes ``rule``."""
    if isinstance(rule, OneShot):
        return DateTrigger(run_date=rule.at)
    if isinstance(rule, Repeating):
        return IntervalTrigger(seconds=int(rule.period.total_seconds()))
    raise TypeError(f"Unsupported firing rule: {rule!r}")


class TimerHandle:
    """Control token for one scheduled job."""

    def __init__(self, scheduler: BackgroundScheduler, job_id: str, rule: FiringRule) -> None:
        self._scheduler = scheduler
        self.job_id = job_id
        self.rule = rule
        self._stopped = False
        self._in_flight = 0
        self._lock = threading.Lock()

    @classmethod
    def arm(
        cls,
        scheduler: BackgroundScheduler,
        name: str,
        rule: FiringRule,
        func: Callable[..., Any],
        args: Sequence[Any] = (),
    ) -> "TimerHandle":
        """Add a job for ``rule`` and return its handle.

        The job id is derived from ``name`` plus a random suffix so a
        name can be reused after its previous job was removed.  It is
        appended to ``args``, so ``func`` can tell which job fired it.
        """
        handle = cls(scheduler, f"{name}:{uuid4().hex}", rule)
        scheduler.add_job(
            func,
            trigger=build_trigger(rule),
            args=[*args, handle.job_id],
            id=handle.job_id,
            name=name,
        )
        logger.debug("Armed job %s with %r", handle.job_id, rule)
        return handle

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        """Pause the job; no firing starts after this returns."""
        with self._lock:
            self._stopped = True
            try:
                self._scheduler.pause_job(self.job_id)
            except JobLookupError:
                # One-shot already fired and was discarded.
                pass

    def start(self) -> None:
        """Resume a stopped job.  An inert one-shot stays inert."""
        with self._lock:
            if not self._stopped:
                return
            if self._scheduler.get_job(self.job_id) is None:
                self._stopped = False
                return
            self._scheduler.resume_job(self.job_id)
            self._stopped = False

    def cancel(self) -> None:
        """Stop the job and remove it from the scheduler."""
        with self._lock:
            self._stopped = True
            try:
                self._scheduler.remove_job(self.job_id)
            except JobLookupError:
                pass

    def mark_invoking(self) -> None:
        with self._lock:
            self._in_flight += 1

    def mark_idle(self) -> None:
        with self._lock:
            self._in_flight = max(0, self._in_flight - 1)

    @property
    def next_run_time(self) -> Optional[datetime]:
        job = self._scheduler.get_job(self.job_id)
        if job is None or self._stopped:
            return None
        return getattr(job, "next_run_time", None)

    @property
    def state(self) -> str:
        if self._stopped:
            return STOPPED
        if self._in_flight:
            return INVOKING
        if self._scheduler.get_job(self.job_id) is None:
            return INERT
        return ARMED
