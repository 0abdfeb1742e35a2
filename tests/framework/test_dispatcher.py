"""
Tests for opsbot.framework.dispatcher.

Tests cover:
- Routing to matching operations only, in load order
- Per-operation isolation of skips, failures and escaped exceptions
- Concurrent mode
- Reload while a dispatch is in flight
"""

import asyncio

import pytest

from opsbot.framework.dispatcher import Dispatcher, OperationStatus
from opsbot.framework.operation import Operation
from opsbot.framework.task import Task


@pytest.fixture
def journal():
    return []


@pytest.fixture
def registry(registry_of, journal):
    async def record(ctx, args):
        journal.append(args["tag"])
        return args["tag"]

    async def skip(ctx, args):
        journal.append(args["tag"])
        return None

    async def explode(ctx, args):
        journal.append(args["tag"])
        raise RuntimeError("boom")

    return registry_of(record=record, skip=skip, explode=explode)


def op(registry, name, events, *steps):
    return Operation(name, events, [Task(call, {"tag": tag}, tag, registry) for call, tag in steps])


class TestDispatch:
    @pytest.mark.asyncio
    async def test_only_matching_operations_run(self, registry, journal, make_context):
        a = op(registry, "A", ["issues.labeled"], ("record", "a1"), ("record", "a2"))
        b = op(registry, "B", ["issues.opened"], ("record", "b1"))
        dispatcher = Dispatcher([a, b])

        runs = await dispatcher.dispatch("issues.labeled", make_context("issues.labeled"))

        assert journal == ["a1", "a2"]
        assert [r.operation for r in runs] == ["A"]
        assert runs[0].status is OperationStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_no_match_runs_nothing(self, registry, journal, make_context):
        dispatcher = Dispatcher([op(registry, "A", ["issues.opened"], ("record", "a1"))])

        runs = await dispatcher.dispatch("push", make_context("push"))

        assert runs == []
        assert journal == []

    @pytest.mark.asyncio
    async def test_same_event_same_order(self, registry, journal, make_context):
        a = op(registry, "A", ["e"], ("record", "a1"), ("record", "a2"))
        b = op(registry, "B", ["e"], ("record", "b1"))
        dispatcher = Dispatcher([a, b])

        await dispatcher.dispatch("e", make_context("e"))
        first = list(journal)
        journal.clear()
        await dispatcher.dispatch("e", make_context("e"))

        assert first == ["a1", "a2", "b1"]
        assert journal == first

    @pytest.mark.asyncio
    async def test_failed_operation_does_not_stop_sibling(self, registry, journal, make_context):
        a = op(registry, "A", ["e"], ("record", "a1"), ("explode", "a2"), ("record", "a3"))
        b = op(registry, "B", ["e"], ("record", "b1"))
        dispatcher = Dispatcher([a, b])

        runs = await dispatcher.dispatch("e", make_context("e"))

        assert journal == ["a1", "a2", "b1"]
        assert [r.status for r in runs] == [OperationStatus.FAILED, OperationStatus.COMPLETED]
        assert runs[0].error == "boom"

    @pytest.mark.asyncio
    async def test_skipped_operation_does_not_stop_sibling(self, registry, journal, make_context):
        a = op(registry, "A", ["e"], ("skip", "a1"), ("record", "a2"))
        b = op(registry, "B", ["e"], ("record", "b1"))

        runs = await Dispatcher([a, b]).dispatch("e", make_context("e"))

        assert journal == ["a1", "b1"]
        assert runs[0].status is OperationStatus.SKIPPED
        assert runs[1].status is OperationStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_exception_escaping_operation_is_isolated(self, registry, journal, make_context):
        class BrokenOperation(Operation):
            async def run(self, context):
                raise RuntimeError("operation bug")

        broken = BrokenOperation("Broken", ["e"], [])
        b = op(registry, "B", ["e"], ("record", "b1"))

        runs = await Dispatcher([broken, b]).dispatch("e", make_context("e"))

        assert runs[0].status is OperationStatus.FAILED
        assert runs[0].error == "operation bug"
        assert runs[1].status is OperationStatus.COMPLETED
        assert journal == ["b1"]

    @pytest.mark.asyncio
    async def test_duplicate_trigger_runs_once(self, registry, journal, make_context):
        a = op(registry, "A", ["a", "a", "b"], ("record", "a1"))
        dispatcher = Dispatcher([a])

        await dispatcher.dispatch("a", make_context("a"))
        await dispatcher.dispatch("b", make_context("b"))
        await dispatcher.dispatch("c", make_context("c"))

        assert journal == ["a1", "a1"]

    @pytest.mark.asyncio
    async def test_run_records_timing(self, registry, make_context):
        runs = await Dispatcher([op(registry, "A", ["e"], ("record", "a1"))]).dispatch("e", make_context("e"))

        assert runs[0].completed_at is not None
        assert runs[0].duration_seconds is not None
        assert runs[0].event_type == "e"


class TestConcurrentDispatch:
    @pytest.mark.asyncio
    async def test_operations_overlap(self, registry_of, make_context):
        started = asyncio.Event()
        order = []

        async def slow(ctx, args):
            order.append("slow.start")
            await started.wait()
            order.append("slow.end")
            return True

        async def fast(ctx, args):
            order.append("fast")
            started.set()
            return True

        registry = registry_of(slow=slow, fast=fast)
        a = Operation("A", ["e"], [Task("slow", {}, None, registry)])
        b = Operation("B", ["e"], [Task("fast", {}, None, registry)])

        runs = await asyncio.wait_for(
            Dispatcher([a, b], concurrent=True).dispatch("e", make_context("e")),
            timeout=5,
        )

        assert order == ["slow.start", "fast", "slow.end"]
        assert [r.operation for r in runs] == ["A", "B"]
        assert all(r.status is OperationStatus.COMPLETED for r in runs)

    @pytest.mark.asyncio
    async def test_failure_isolated_when_concurrent(self, registry, journal, make_context):
        a = op(registry, "A", ["e"], ("explode", "a1"), ("record", "a2"))
        b = op(registry, "B", ["e"], ("record", "b1"), ("record", "b2"))

        runs = await Dispatcher([a, b], concurrent=True).dispatch("e", make_context("e"))

        assert "a2" not in journal
        assert journal.count("b1") == 1 and journal.count("b2") == 1
        assert [r.status for r in runs] == [OperationStatus.FAILED, OperationStatus.COMPLETED]


class TestReload:
    @pytest.mark.asyncio
    async def test_reload_replaces_operations(self, registry, journal, make_context):
        dispatcher = Dispatcher([op(registry, "A", ["e"], ("record", "a1"))])

        await dispatcher.reload([op(registry, "B", ["e"], ("record", "b1"))])
        await dispatcher.dispatch("e", make_context("e"))

        assert [o.name for o in dispatcher.operations] == ["B"]
        assert journal == ["b1"]

    @pytest.mark.asyncio
    async def test_in_flight_dispatch_keeps_snapshot(self, registry_of, make_context):
        gate = asyncio.Event()
        journal = []

        async def wait(ctx, args):
            journal.append(args["tag"])
            await gate.wait()
            return True

        async def record(ctx, args):
            journal.append(args["tag"])
            return True

        registry = registry_of(wait=wait, record=record)
        a = Operation("A", ["e"], [Task("wait", {"tag": "a1"}, None, registry)])
        b = Operation("B", ["e"], [Task("record", {"tag": "b1"}, None, registry)])
        c = Operation("C", ["e"], [Task("record", {"tag": "c1"}, None, registry)])
        dispatcher = Dispatcher([a, b])

        in_flight = asyncio.create_task(dispatcher.dispatch("e", make_context("e")))
        await asyncio.sleep(0)
        await dispatcher.reload([c])
        gate.set()
        runs = await asyncio.wait_for(in_flight, timeout=5)

        assert [r.operation for r in runs] == ["A", "B"]
        assert journal == ["a1", "b1"]
