"""Tests for the settle-all concurrent join."""

import asyncio

import pytest

from concierge.utils.async_helpers import gather_settled


async def _value(value, delay=0.0):
    await asyncio.sleep(delay)
    return value


async def _fail(message, delay=0.0):
    await asyncio.sleep(delay)
    raise RuntimeError(message)


async def _cancelled():
    raise asyncio.CancelledError()


def test_successes_and_failures_are_separated(asyncio_event_loop):
    settled = asyncio_event_loop.run_until_complete(gather_settled({
        "jets": _value([1, 2]),
        "yachts": _fail("boom"),
        "cars": _value([], delay=0.01),
    }))

    assert settled.successes == {"jets": [1, 2], "cars": []}
    assert list(settled.failures) == ["yachts"]
    assert str(settled.failures["yachts"]) == "boom"
    assert not settled.all_succeeded


def test_failure_does_not_cancel_slower_siblings(asyncio_event_loop):
    settled = asyncio_event_loop.run_until_complete(gather_settled({
        "fast_fail": _fail("early"),
        "slow": _value("done", delay=0.05),
    }))

    assert settled.successes == {"slow": "done"}


def test_empty_mapping(asyncio_event_loop):
    settled = asyncio_event_loop.run_until_complete(gather_settled({}))
    assert settled.successes == {} and settled.all_succeeded


def test_cancellation_is_reraised(asyncio_event_loop):
    with pytest.raises(asyncio.CancelledError):
        asyncio_event_loop.run_until_complete(gather_settled({"x": _cancelled(), "y": _value(1)}))
