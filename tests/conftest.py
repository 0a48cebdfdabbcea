"""Pytest configuration and fixtures."""

import asyncio
import sys
from pathlib import Path
from typing import Any, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cctp.transfer_tracker import TransferTracker  # noqa: E402
from core.types import MessageRecord, TransferRecord  # noqa: E402
from layerzero.message_tracker import MessageTracker  # noqa: E402
from tracking import PollPolicy  # noqa: E402


def _next_response(responses: List[Any]) -> Any:
    # The last scripted response repeats forever
    item = responses.pop(0) if len(responses) > 1 else responses[0]
    if isinstance(item, BaseException):
        raise item
    if isinstance(item, type) and issubclass(item, BaseException):
        raise item()
    return item


class ScriptedScanClient:
    """Stands in for LayerZeroScanClient, replaying scripted responses."""

    def __init__(self, *responses: Any):
        self.responses = list(responses) or [None]
        self.calls: List[str] = []

    async def get_message(self, tx_hash: str) -> Optional[MessageRecord]:
        self.calls.append(tx_hash)
        return _next_response(self.responses)


class ScriptedIrisClient:
    """Stands in for IrisClient, replaying scripted responses."""

    def __init__(self, *responses: Any):
        self.responses = list(responses) or [None]
        self.calls: List[tuple] = []

    async def get_transfer(self, tx_hash: str, source_domain: int) -> Optional[TransferRecord]:
        self.calls.append((tx_hash, source_domain))
        return _next_response(self.responses)


class BlockingScanClient:
    """Holds every query open until release() is called."""

    def __init__(self, response: Optional[MessageRecord]):
        self.response = response
        self.started = asyncio.Event()
        self._released = asyncio.Event()

    def release(self) -> None:
        self._released.set()

    async def get_message(self, tx_hash: str) -> Optional[MessageRecord]:
        self.started.set()
        await self._released.wait()
        return self.response


class BlockingIrisClient:
    """Holds every attestation query open until release() is called."""

    def __init__(self, response: Optional[TransferRecord]):
        self.response = response
        self.started = asyncio.Event()
        self._released = asyncio.Event()

    def release(self) -> None:
        self._released.set()

    async def get_transfer(self, tx_hash: str, source_domain: int) -> Optional[TransferRecord]:
        self.started.set()
        await self._released.wait()
        return self.response


def fast_policy(max_attempts: int = 10) -> PollPolicy:
    return PollPolicy(poll_interval=0, max_attempts=max_attempts, startup_delay=0)


@pytest.fixture
def updates() -> list:
    """Collects every StepUpdate a tracker emits."""
    return []


@pytest.fixture
def make_message_tracker():
    def _make(client, max_attempts: int = 10) -> MessageTracker:
        return MessageTracker(client, fast_policy(max_attempts))
    return _make


@pytest.fixture
def make_transfer_tracker():
    def _make(client, max_attempts: int = 10) -> TransferTracker:
        return TransferTracker(client, fast_policy(max_attempts))
    return _make
