"""
Outbound calls made when a service's timer fires.

Each firing is handed to :meth:`Invoker.dispatch`, which performs the
HTTP request on its own daemon thread.  A slow or hung target only
delays that one call; the scheduler's worker pool is released as soon
as the thread starts.  Failures are logged and never retried.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Invocation:
    """Snapshot of the call to perform for one firing."""

    service_id: str
    method: str
    url: str
    payload: Dict[str, Any] = field(default_factory=dict)


class Invoker:
    """Performs invocations with ``requests``.

    Parameters
    ----------
    session : requests.Session, optional
        Session used for every call.  A new one is created if omitted.
    timeout : float, optional
        Per-call timeout in seconds.  ``None`` waits indefinitely.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def send(self, invocation: Invocation) -> Optional[requests.Response]:
        """Perform the call synchronously.

        Returns the response for a 2xx answer and ``None`` otherwise.
        Transport errors and non-success statuses are logged, not raised.
        """
        logger.info("running %s", invocation.service_id)
        try:
            response = self.session.request(
                method=invocation.method,
                url=invocation.url,
                json=invocation.payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            logger.debug(
                "Service %s answered %s", invocation.service_id, response.status_code
            )
            return response
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            logger.warning(
                "Invocation of %s failed with status %s", invocation.service_id, status
            )
            return None
        except requests.RequestException as exc:
            logger.error("Invocation of %s failed: %s", invocation.service_id, exc)
            return None

    def dispatch(
        self,
        invocation: Invocation,
        on_done: Optional[Callable[[], None]] = None,
    ) -> threading.Thread:
        """Run :meth:`send` on a detached daemon thread and return it."""

        def _run() -> None:
            try:
                self.send(invocation)
            except Exception:
                logger.exception("Unexpected error while invoking %s", invocation.service_id)
            finally:
                if on_done is not None:
                    on_done()

        thread = threading.Thread(
            target=_run,
            name=f"invoke-{invocation.service_id}",
            daemon=True,
        )
        thread.start()
        return thread
