"""
In-memory registry of scheduled webhook services.

The registry is the only owner of :class:`ScheduledService` entries
and their timers.  Every read and write of the id map happens under a
single lock, so a register racing a deregister on the same id never
leaves a half-built or half-removed entry.  Timer callbacks take the
same lock only long enough to copy the call they are about to make;
the call itself runs outside it, on the invoker's own thread.

Duplicate registrations and unknown ids are not errors here: the
former returns ``None`` and the latter ``False``, and the HTTP layer
decides how to report them.
"""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ..core.config import Settings, settings as default_settings
from ..schemas.service import ServiceDefinition, ServiceStatus
from .invoker import Invocation, Invoker
from .timers import TimerHandle, create_scheduler
from .timing import to_firing_rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledService:
    """A registered service and the timer that drives it."""

    definition: ServiceDefinition
    timer: TimerHandle

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def url(self) -> str:
        return self.definition.url

    @property
    def method(self) -> str:
        return self.definition.method.value

    @property
    def payload(self) -> Dict[str, Any]:
        return self.definition.payload

    @property
    def interval(self) -> int:
        return self.definition.interval

    @property
    def recurring(self) -> bool:
        return self.definition.recurring

    def to_status(self) -> ServiceStatus:
        return ServiceStatus(
            id=self.id,
            url=self.url,
            payload=self.payload,
            method=self.definition.method,
            interval=self.interval,
            recurring=self.recurring,
            state=self.timer.state,
            next_run_time=self.timer.next_run_time,
        )


class ServiceRegistry:
    """Registry of scheduled services keyed by id.

    Parameters
    ----------
    scheduler : BackgroundScheduler, optional
        Timer subsystem.  Built from ``settings`` if omitted.
    invoker : Invoker, optional
        Performs the outbound calls.  Built from ``settings`` if omitted.
    settings : Settings, optional
        Configuration used for the defaults above.
    """

    def __init__(
        self,
        scheduler: Optional[BackgroundScheduler] = None,
        invoker: Optional[Invoker] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        cfg = settings or default_settings
        self.scheduler = scheduler or create_scheduler(
            timezone=cfg.scheduler_timezone,
            max_workers=cfg.scheduler_max_workers,
        )
        self.invoker = invoker or Invoker(timeout=cfg.invoke_timeout)
        self._services: Dict[str, ScheduledService] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Start the timer subsystem if it is not running yet."""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Scheduler started")

    def shutdown(self, wait: bool = False) -> None:
        """Shut the timer subsystem down.  Entries are kept in memory."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
            logger.info("Scheduler stopped")

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(self, definition: ServiceDefinition) -> Optional[ScheduledService]:
        """Schedule ``definition`` and return the new entry.

        Returns ``None`` without touching the registry if the id is
        already registered.
        """
        with self._lock:
            if definition.id in self._services:
                logger.warning("Service with id %s already exists", definition.id)
                return None
            rule = to_firing_rule(definition.interval, definition.recurring)
            timer = TimerHandle.arm(
                self.scheduler,
                definition.id,
                rule,
                self.invoke,
                args=(definition.id,),
            )
            service = ScheduledService(definition=definition, timer=timer)
            self._services[definition.id] = service
        logger.info("Registered service %s (%r)", definition.id, rule)
        return service

    def deregister(self, service_id: str) -> bool:
        """Cancel the timer of ``service_id`` and remove it.

        Returns ``False`` if no such service is registered.
        """
        with self._lock:
            service = self._services.get(service_id)
            if service is None:
                logger.warning("Service with id %s not found for deregistration", service_id)
                return False
            service.timer.cancel()
            del self._services[service_id]
        logger.info("Deregistered service %s", service_id)
        return True

    # ------------------------------------------------------------------
    # Start/stop control
    # ------------------------------------------------------------------
    def stop_service(self, service_id: str) -> bool:
        with self._lock:
            service = self._services.get(service_id)
            if service is None:
                return False
            service.timer.stop()
        logger.info("Stopped service %s", service_id)
        return True

    def start_service(self, service_id: str) -> bool:
        with self._lock:
            service = self._services.get(service_id)
            if service is None:
                return False
            service.timer.start()
        logger.info("Started service %s", service_id)
        return True

    def stop_all(self) -> None:
        """Stop every timer.  Entries stay registered."""
        with self._lock:
            services = list(self._services.values())
            for service in services:
                service.timer.stop()
        logger.info("Stopped %d service(s)", len(services))

    def start_all(self) -> None:
        """Resume every stopped timer."""
        with self._lock:
            services = list(self._services.values())
            for service in services:
                service.timer.start()
        logger.info("Started %d service(s)", len(services))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get(self, service_id: str) -> Optional[ScheduledService]:
        with self._lock:
            return self._services.get(service_id)

    def list(self) -> List[ScheduledService]:
        """Return a snapshot of all entries in registration order."""
        with self._lock:
            return list(self._services.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._services)

    def __contains__(self, service_id: object) -> bool:
        with self._lock:
            return service_id in self._services

    # ------------------------------------------------------------------
    # Timer callback
    # ------------------------------------------------------------------
    def invoke(self, service_id: str, job_id: Optional[str] = None) -> Optional[Invocation]:
        """Fire ``service_id``: hand its call to the invoker.

        Runs on a scheduler worker thread.  A service that disappeared
        or was stopped since the timer was armed is skipped, and so is a
        firing of ``job_id`` once that job no longer drives the entry
        (the id was deregistered and registered again).  Returns the
        dispatched invocation, or ``None`` when nothing was sent.
        """
        with self._lock:
            service = self._services.get(service_id)
            if service is None or (job_id is not None and service.timer.job_id != job_id):
                logger.warning("Service with id %s has no context", service_id)
                return None
            if service.timer.stopped:
                logger.debug("Service %s is stopped; skipping firing", service_id)
                return None
            invocation = Invocation(
                service_id=service.id,
                method=service.method,
                url=service.url,
                payload=copy.deepcopy(service.payload),
            )
            timer = service.timer
            timer.mark_invoking()

        try:
            self.invoker.dispatch(invocation, on_done=timer.mark_idle)
        except Exception:
            timer.mark_idle()
            logger.exception("Could not dispatch invocation of %s", service_id)
            return None
        return invocation
