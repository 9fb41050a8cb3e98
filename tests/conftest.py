from __future__ import annotations

import threading
from typing import Callable, List, Optional

import pytest

from congest.app.services.invoker import Invocation
from congest.app.services.registry import ServiceRegistry
from congest.app.services.timers import create_scheduler


class RecordingInvoker:
    """Invoker fake that records calls instead of sending them."""

    def __init__(self) -> None:
        self.calls: List[Invocation] = []
        self.fired = threading.Event()
        self._lock = threading.Lock()

    def dispatch(self, invocation: Invocation, on_done: Optional[Callable[[], None]] = None) -> None:
        with self._lock:
            self.calls.append(invocation)
        self.fired.set()
        if on_done is not None:
            on_done()

    def ids(self) -> List[str]:
        with self._lock:
            return [call.service_id for call in self.calls]

    def count(self, service_id: str) -> int:
        return self.ids().count(service_id)


@pytest.fixture
def invoker() -> RecordingInvoker:
    return RecordingInvoker()


@pytest.fixture
def registry(invoker: RecordingInvoker):
    reg = ServiceRegistry(scheduler=create_scheduler(), invoker=invoker)
    reg.start()
    yield reg
    reg.shutdown(wait=False)


@pytest.fixture
def idle_registry(invoker: RecordingInvoker):
    """Registry whose scheduler is never started, so nothing fires."""
    return ServiceRegistry(scheduler=create_scheduler(), invoker=invoker)
