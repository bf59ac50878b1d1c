from __future__ import annotations

import asyncio
import os
import sys
import tempfile
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

# Must be set before tools.logger is imported, it opens its log files on import.
os.environ.setdefault("RELAY_LOG_DIR", tempfile.mkdtemp(prefix="relay-logs-"))

from use_cases.signaling_router import SignalingRouter  # noqa: E402

PURGE_DELAY = 0.05


class FakeTransport:
    """Records every emit instead of delivering it."""

    def __init__(self):
        self.sent: list[tuple[str, str, object]] = []

    async def emit(self, event, data=None, to=None):
        self.sent.append((to, event, data))

    def received(self, handle: str, event: str | None = None) -> list:
        return [
            (name, data)
            for target, name, data in self.sent
            if target == handle and (event is None or name == event)
        ]

    def payloads(self, handle: str, event: str) -> list:
        return [data for _, data in self.received(handle, event)]

    def events(self, event: str) -> list:
        return [(target, data) for target, name, data in self.sent if name == event]

    def clear(self) -> None:
        self.sent.clear()


class FakeServer:
    """Captures handlers registered through server.on(name)."""

    def __init__(self):
        self.handlers = {}

    def on(self, name):
        def register(handler):
            self.handlers[name] = handler
            return handler

        return register


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def router(transport) -> SignalingRouter:
    relay = SignalingRouter(transport, purge_delay=PURGE_DELAY)
    yield relay
    relay.close()


@pytest.fixture()
def run():
    def _run(coro):
        return asyncio.run(coro)

    return _run


async def login_all(router: SignalingRouter, *identities: str) -> None:
    """Connect and log in one connection per identity, using "sid-<identity>"."""
    for identity in identities:
        await router.handle_connect(f"sid-{identity}")
        await router.handle_login(f"sid-{identity}", identity)


@pytest.fixture()
def login():
    return login_all
