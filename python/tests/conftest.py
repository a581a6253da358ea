"""
Pytest configuration and fixtures for rip8-dbg tests.
"""

from __future__ import annotations

import pytest

from rip8_fakes import FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
