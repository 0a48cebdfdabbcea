"""Tests for the shared polling runtime."""

import asyncio

import pytest

from tracking import PollPolicy, Tracking, invoke_callback


class TestPollPolicy:
    """Tests for PollPolicy."""

    def test_message_deadline(self):
        assert PollPolicy(poll_interval=6.0, max_attempts=60).deadline_minutes == 6

    def test_transfer_deadline(self):
        assert PollPolicy(poll_interval=8.0, max_attempts=60).deadline_minutes == 8


class TestTracking:
    """Tests for the Tracking handle."""

    @pytest.mark.asyncio
    async def test_emit_after_cancel_is_dropped(self):
        received = []
        tracking = Tracking("test")

        assert await tracking.emit(received.append, 1)
        tracking.cancel()
        assert not await tracking.emit(received.append, 2)

        assert received == [1]

    @pytest.mark.asyncio
    async def test_cancel_stops_task(self):
        tracking = Tracking("test").attach(asyncio.sleep(3600))

        tracking.cancel()
        await tracking.wait()

        assert tracking.stopped
        assert tracking.done()

    @pytest.mark.asyncio
    async def test_wait_without_task(self):
        await Tracking("idle").wait()

    @pytest.mark.asyncio
    async def test_invoke_callback_awaits_coroutines(self):
        received = []

        async def callback(value):
            received.append(value)

        await invoke_callback(callback, "x")
        await invoke_callback(None, "y")

        assert received == ["x"]
