"""Unit tests for reading search form values and the ready condition."""

from __future__ import annotations

import asyncio

from datagrid import form_bridge
from datagrid.form_bridge import ReadyCondition, read_form_values


class AsyncForm:
    def __init__(self, values=None, delay: float = 0.0, error: Exception | None = None):
        self.values = values if values is not None else {}
        self.delay = delay
        self.error = error
        self.finished = False
        self.cancelled = False

    async def get_values(self):
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        self.finished = True
        if self.error is not None:
            raise self.error
        return self.values


class SyncForm:
    def __init__(self, values):
        self.values = values

    def get_values(self):
        return self.values


class NoValuesForm:
    pass


def test_missing_or_incomplete_provider_gives_empty_form() -> None:
    assert asyncio.run(read_form_values(None)) == {}
    assert asyncio.run(read_form_values(NoValuesForm())) == {}


def test_async_values_are_returned_as_copy() -> None:
    values = {"name": "ana"}
    result = asyncio.run(read_form_values(AsyncForm(values)))
    assert result == {"name": "ana"}
    assert result is not values


def test_sync_values_are_accepted() -> None:
    assert asyncio.run(read_form_values(SyncForm({"status": 1}))) == {"status": 1}


def test_non_mapping_values_give_empty_form() -> None:
    assert asyncio.run(read_form_values(SyncForm(["a", "b"]))) == {}
    assert asyncio.run(read_form_values(AsyncForm(values="oops"))) == {}


def test_failing_provider_gives_empty_form() -> None:
    class Broken:
        def get_values(self):
            raise RuntimeError("form not ready")

    assert asyncio.run(read_form_values(Broken())) == {}
    assert asyncio.run(read_form_values(AsyncForm(error=ValueError("boom")))) == {}


def test_timeout_abandons_read_without_cancelling_it() -> None:
    """A slow form is ignored after the timeout but still finishes its work."""
    form = AsyncForm({"late": True}, delay=0.05)

    async def scenario():
        result = await read_form_values(form, timeout=0.01)
        assert not form.finished
        await asyncio.sleep(0.1)
        return result

    assert asyncio.run(scenario()) == {}
    assert form.finished
    assert not form.cancelled


def test_abandoned_read_is_held_until_it_finishes() -> None:
    form = AsyncForm({"late": True}, delay=0.05)

    async def scenario():
        await read_form_values(form, timeout=0.01)
        assert len(form_bridge._pending_reads) == 1
        await asyncio.sleep(0.1)
        assert form_bridge._pending_reads == set()

    asyncio.run(scenario())
    assert form.finished


def test_ready_condition_wait() -> None:
    async def scenario():
        condition = ReadyCondition()
        assert not condition.is_true
        assert await condition.wait(timeout=0.01) is False

        waiter = asyncio.create_task(condition.wait(timeout=1))
        await asyncio.sleep(0)
        condition.set_true()
        assert await waiter is True
        assert await condition.wait() is True

        condition.reset()
        assert not condition.is_true

    asyncio.run(scenario())
