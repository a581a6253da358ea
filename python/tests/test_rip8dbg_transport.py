import asyncio
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import List, Set, Tuple
from unittest.mock import MagicMock

import pytest
import requests

from rip8dbg.poller import PollerConfig, StatePoller
from rip8dbg.state import ClientState
from rip8dbg.transport import HTTPTransport, TransportConfig, TransportError

from rip8_fakes import default_routes


class DummyDebugServer:
    """Minimal stand-in for the emulator's debug HTTP server."""

    def __init__(self) -> None:
        self.routes = default_routes()
        self.requests: List[Tuple[str, str]] = []
        self.hang: Set[str] = set()
        self.release = threading.Event()
        server = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                server.requests.append(("GET", self.path))
                if self.path in server.hang:
                    server.release.wait()
                    self.send_error(503)
                    return
                if self.path not in server.routes:
                    self.send_error(404)
                    return
                self._reply(json.dumps(server.routes[self.path]))

            def do_POST(self) -> None:
                server.requests.append(("POST", self.path))
                self._reply("")

            def _reply(self, body: str) -> None:
                data = body.encode("utf-8")
                self.send_response(200)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(data)))
                self.end_headers()
                self.wfile.write(data)

            def log_message(self, format, *args) -> None:
                pass

        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self.port = self._httpd.server_address[1]
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)
        self._thread.start()

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    def close(self) -> None:
        self.release.set()
        self._httpd.shutdown()
        self._httpd.server_close()
        self._thread.join(timeout=1)


def _direct_session() -> requests.Session:
    session = requests.Session()
    session.trust_env = False
    return session


@pytest.fixture
def server():
    srv = DummyDebugServer()
    yield srv
    srv.close()


def test_url_for_joins_base_and_path():
    transport = HTTPTransport(TransportConfig(base_url="http://localhost:8000/"), session=MagicMock())
    assert transport.url_for("/memory") == "http://localhost:8000/memory"
    assert transport.url_for("pause") == "http://localhost:8000/pause"


def test_request_passes_timeout_and_returns_body():
    session = MagicMock()
    session.request.return_value = MagicMock(status_code=200, text="[1, 2]")
    transport = HTTPTransport(TransportConfig(timeout=2.5), session=session)
    assert transport.request("GET", "/memory") == "[1, 2]"
    session.request.assert_called_once_with("GET", "http://localhost:8000/memory", timeout=2.5)


def test_error_status_maps_to_transport_error():
    session = MagicMock()
    session.request.return_value = MagicMock(status_code=500, text="")
    transport = HTTPTransport(session=session)
    with pytest.raises(TransportError) as excinfo:
        transport.request("POST", "/pause")
    assert "HTTP 500" in str(excinfo.value)


def test_network_failure_maps_to_transport_error():
    session = MagicMock()
    session.request.side_effect = requests.ConnectionError("refused")
    transport = HTTPTransport(session=session)
    with pytest.raises(TransportError):
        transport.request("GET", "/registers")


def test_closed_transport_refuses_requests():
    session = MagicMock()
    transport = HTTPTransport(session=session)
    transport.close()
    session.close.assert_called_once()
    with pytest.raises(TransportError):
        transport.request("GET", "/registers")
    session.request.assert_not_called()


@pytest.mark.asyncio
async def test_poll_against_http_server(server):
    transport = HTTPTransport(TransportConfig(base_url=server.base_url, timeout=5.0), session=_direct_session())
    state = ClientState()
    try:
        outcome = await StatePoller(transport, state).poll_once()
        assert all(outcome.values())
        assert state.registers["I"] == 0x2A0
        assert len(state.memory) == 4096
        assert state.value("next_instruction") == {"LD": ["V0", {"Byte": 5}]}

        await transport.post("/add-pc-breakpoint/512")
        assert ("POST", "/add-pc-breakpoint/512") in server.requests

        with pytest.raises(TransportError):
            await transport.get("/stack")
    finally:
        transport.close()


@pytest.mark.asyncio
async def test_hung_endpoint_only_stalls_its_own_channel(server):
    server.hang.add("/memory")
    transport = HTTPTransport(TransportConfig(base_url=server.base_url), session=_direct_session())
    state = ClientState()
    poller = StatePoller(transport, state, config=PollerConfig(interval=0.02))
    poller.start()
    try:
        await asyncio.sleep(0.4)
        early = state.stats["registers"].successes
        await asyncio.sleep(0.4)
        late = state.stats["registers"].successes
    finally:
        await poller.stop()
        transport.close()

    assert early > 0
    assert late > early
    assert server.requests.count(("GET", "/memory")) == 1
    assert state.memory is None
    assert state.stats["memory"].skipped > 0
