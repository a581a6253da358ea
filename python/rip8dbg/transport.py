"""
Transport layer for rip8dbg.

Responsibilities:
    * Issue single GET/POST requests against the rip8 debug server.
    * Map network failures and error statuses onto ``TransportError``.
    * Offer awaitable wrappers so the poller can fan out requests from an
      asyncio loop while ``requests`` does the blocking work in a thread.

There is no retry and no reconnect logic here: one call, one response.
Each request runs on its own daemon thread, so a call that never returns
neither starves other requests nor keeps the process alive at exit.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

import requests

LOGGER = logging.getLogger("rip8dbg.transport")

DEFAULT_BASE_URL = "http://localhost:8000"


class TransportError(RuntimeError):
    """Raised when the transport cannot complete a request."""


@dataclass
class TransportConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = None


@dataclass
class HTTPTransport:
    """Thin HTTP wrapper around a shared ``requests.Session``."""

    config: TransportConfig = field(default_factory=TransportConfig)
    session: Optional[requests.Session] = None

    _closed: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    def url_for(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    def request(self, method: str, path: str) -> str:
        """Perform one blocking request and return the response body."""
        if self._closed:
            raise TransportError("transport closed")
        url = self.url_for(path)
        try:
            response = self.session.request(method, url, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc
        if response.status_code >= 400:
            raise TransportError(f"{method} {path} returned HTTP {response.status_code}")
        LOGGER.debug("%s %s -> %s", method, path, response.status_code)
        return response.text

    async def _submit(self, method: str, path: str) -> str:
        if self._closed:
            raise TransportError("transport closed")
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def deliver(result: Optional[str], error: Optional[BaseException]) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def worker() -> None:
            try:
                result, error = self.request(method, path), None
            except Exception as exc:
                result, error = None, exc
            try:
                loop.call_soon_threadsafe(deliver, result, error)
            except RuntimeError:
                # loop already closed; nobody is waiting any more
                LOGGER.debug("%s %s finished after the event loop closed", method, path)

        threading.Thread(target=worker, name=f"rip8dbg {method} {path}", daemon=True).start()
        return await future

    async def get(self, path: str) -> str:
        return await self._submit("GET", path)

    async def post(self, path: str) -> str:
        return await self._submit("POST", path)

    def close(self) -> None:
        self._closed = True
        session = self.session
        if session is not None:
            session.close()
