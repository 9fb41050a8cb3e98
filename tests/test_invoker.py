from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import MagicMock

import pytest
import requests

from congest.app.services.invoker import Invocation, Invoker

INVOCATION = Invocation(
    service_id="svc",
    method="POST",
    url="http://example.invalid/hook",
    payload={"hello": "world"},
)


def _session(response=None, error=None):
    session = MagicMock(spec=requests.Session)
    if error is not None:
        session.request.side_effect = error
    else:
        session.request.return_value = response
    return session


def test_send_posts_payload_as_json():
    response = MagicMock(status_code=200)
    session = _session(response)
    invoker = Invoker(session=session, timeout=5)

    assert invoker.send(INVOCATION) is response
    session.request.assert_called_once_with(
        method="POST",
        url="http://example.invalid/hook",
        json={"hello": "world"},
        timeout=5,
    )


def test_send_logs_non_success_status(caplog):
    response = MagicMock(status_code=500)
    response.raise_for_status.side_effect = requests.HTTPError(response=response)
    invoker = Invoker(session=_session(response))

    with caplog.at_level("WARNING"):
        assert invoker.send(INVOCATION) is None
    assert "status 500" in caplog.text


def test_send_swallows_transport_errors(caplog):
    invoker = Invoker(session=_session(error=requests.ConnectionError("refused")))

    with caplog.at_level("ERROR"):
        assert invoker.send(INVOCATION) is None
    assert "refused" in caplog.text


def test_dispatch_runs_on_its_own_thread():
    seen = []
    done = threading.Event()

    def fake_request(**kwargs):
        seen.append(threading.current_thread().name)
        return MagicMock(status_code=204)

    session = MagicMock(spec=requests.Session)
    session.request.side_effect = fake_request

    thread = Invoker(session=session).dispatch(INVOCATION, on_done=done.set)
    thread.join(2)

    assert done.is_set()
    assert seen == ["invoke-svc"]
    assert thread.daemon


def test_dispatch_contains_unexpected_errors(caplog):
    done = threading.Event()
    invoker = Invoker(session=_session(error=RuntimeError("boom")))

    with caplog.at_level("ERROR"):
        invoker.dispatch(INVOCATION, on_done=done.set).join(2)

    assert done.is_set()
    assert "Unexpected error while invoking svc" in caplog.text


class _Recorder(BaseHTTPRequestHandler):
    received = []

    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        type(self).received.append((self.command, self.path, body))
        self.send_response(200)
        self.end_headers()

    do_POST = do_PUT = do_GET = do_DELETE = _handle

    def log_message(self, format, *args):
        pass


@pytest.fixture
def target():
    _Recorder.received = []
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Recorder)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE"])
def test_send_against_live_server(target, method):
    invocation = Invocation(service_id="live", method=method, url=f"{target}/hook", payload={"n": 1})

    response = Invoker(timeout=5).send(invocation)

    assert response is not None
    assert response.status_code == 200
    command, path, body = _Recorder.received[0]
    assert (command, path) == (method, "/hook")
    assert json.loads(body) == {"n": 1}
