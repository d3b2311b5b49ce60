import asyncio

import pytest

from hotel_search.frp import EventBus, Debouncer


@pytest.mark.asyncio
async def test_publish_reaches_matching_subscribers():
    bus = EventBus()
    received = []

    async def on_async(event):
        received.append(("async", event.payload["n"]))

    bus.subscribe("SEARCH", lambda event: received.append(("sync", event.payload["n"])))
    bus.subscribe("SEARCH", on_async, filter_predicate=lambda event: event.payload["n"] > 1)
    bus.subscribe("OTHER", lambda event: received.append(("other", 0)))

    await bus.emit("SEARCH", {"n": 1})
    await bus.emit("SEARCH", {"n": 2})

    assert received == [("sync", 1), ("sync", 2), ("async", 2)]
    assert bus.get_state() == {"SEARCH": 2}


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_stop_delivery():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe("SEARCH", broken)
    bus.subscribe("SEARCH", lambda event: received.append(event.name))

    await bus.emit("SEARCH")
    assert received == ["SEARCH"]


@pytest.mark.asyncio
async def test_history_is_bounded_and_filterable():
    bus = EventBus(history_limit=3)
    for i in range(5):
        await bus.emit("SEARCH" if i % 2 else "STATE_CHANGED", {"i": i})

    history = bus.get_event_history()
    assert [e.payload["i"] for e in history] == [2, 3, 4]
    assert [e.payload["i"] for e in bus.get_event_history(event_type="SEARCH")] == [3]
    assert bus.get_event_history(limit=0) == ()


def test_unsubscribe():
    bus = EventBus()
    sub_id = bus.subscribe("SEARCH", print)
    assert bus.get_subscriber_count("SEARCH") == 1
    assert bus.unsubscribe(sub_id)
    assert not bus.unsubscribe(sub_id)
    assert bus.get_subscriber_count() == 0


@pytest.mark.asyncio
async def test_debouncer_runs_only_last_action():
    debouncer = Debouncer(0.02)
    calls = []

    def action(n):
        async def run():
            calls.append(n)
        return run

    for n in range(3):
        debouncer.schedule(action(n))
        await asyncio.sleep(0.005)

    assert debouncer.pending
    await debouncer.flush()

    assert calls == [2]
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_debouncer_cancel():
    debouncer = Debouncer(0.01)
    calls = []

    async def action():
        calls.append(1)

    debouncer.schedule(action)
    assert debouncer.cancel()
    assert not debouncer.cancel()
    await debouncer.flush()
    await asyncio.sleep(0.02)

    assert calls == []


@pytest.mark.asyncio
async def test_cancel_does_not_interrupt_running_action():
    debouncer = Debouncer(0)
    started = asyncio.Event()
    finished = []

    async def slow():
        started.set()
        await asyncio.sleep(0.01)
        finished.append(True)

    debouncer.schedule(slow)
    await started.wait()
    assert not debouncer.cancel()
    await debouncer.flush()

    assert finished == [True]
