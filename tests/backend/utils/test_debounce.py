import asyncio

import pytest

from utils.debounce import Debouncer


def test_burst_triggers_one_call_with_last_value():
    calls = []

    def callback(query):
        calls.append(query)
        return query.upper()

    async def run():
        debouncer = Debouncer(callback, delay_ms=20)
        futures = [debouncer.trigger(q) for q in ("c", "ca", "cat")]
        results = await asyncio.gather(*futures)
        return debouncer, results

    debouncer, results = asyncio.run(run())
    assert calls == ["cat"]
    assert results == ["CAT", "CAT", "CAT"]
    assert debouncer.fire_count == 1
    assert not debouncer.pending


def test_retrigger_within_window_postpones_call():
    calls = []

    async def run():
        debouncer = Debouncer(calls.append, delay_ms=200)
        debouncer.trigger("a")
        await asyncio.sleep(0.05)
        last = debouncer.trigger("b")
        await asyncio.sleep(0.05)
        assert "a" not in calls
        await last

    asyncio.run(run())
    assert calls == ["b"]


def test_separate_quiet_periods_fire_separately():
    calls = []

    async def run():
        debouncer = Debouncer(calls.append, delay_ms=10)
        await debouncer.trigger("a")
        await debouncer.trigger("b")

    asyncio.run(run())
    assert calls == ["a", "b"]


def test_async_callback_result_is_delivered():
    async def callback(query):
        await asyncio.sleep(0)
        return f"done:{query}"

    async def run():
        debouncer = Debouncer(callback, delay_ms=5)
        first = debouncer.trigger("x")
        second = debouncer.trigger("y")
        return await first, await second

    assert asyncio.run(run()) == ("done:y", "done:y")


def test_cancel_drops_pending_call():
    calls = []

    async def run():
        debouncer = Debouncer(calls.append, delay_ms=20)
        future = debouncer.trigger("x")
        assert debouncer.pending
        debouncer.cancel()
        await asyncio.sleep(0.05)
        return future

    future = asyncio.run(run())
    assert future.cancelled()
    assert calls == []


def test_callback_error_propagates_to_waiters():
    def callback(query):
        raise ValueError(f"bad {query}")

    async def run():
        debouncer = Debouncer(callback, delay_ms=5)
        await debouncer.trigger("q")

    with pytest.raises(ValueError, match="bad q"):
        asyncio.run(run())


def test_negative_delay_is_clamped():
    assert Debouncer(lambda: None, delay_ms=-10).delay_ms == 0
