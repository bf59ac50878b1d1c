from __future__ import annotations

import asyncio

import pytest

from tools.errors import CallNotFoundError, CallUnauthorizedError, SelfCallError
from use_cases.call_table import CallStatus, CallTable


def test_create_inserts_ringing_record():
    table = CallTable()
    call_id = table.create("alice", "bob")

    record = table.get(call_id)
    assert record.status is CallStatus.RINGING
    assert (record.caller, record.callee) == ("alice", "bob")
    assert call_id.startswith("alice-bob-")


def test_create_rejects_self_call():
    table = CallTable()
    with pytest.raises(SelfCallError):
        table.create("alice", "alice")
    assert len(table) == 0


def test_call_ids_are_unique_for_rapid_redials():
    table = CallTable()
    ids = {table.create("alice", "bob") for _ in range(20)}
    assert len(ids) == 20


@pytest.mark.parametrize(
    "target",
    [CallStatus.ACTIVE, CallStatus.REJECTED, CallStatus.ENDED],
)
def test_ringing_moves_to_any_other_state(target):
    table = CallTable()
    call_id = table.create("alice", "bob")

    table.transition(call_id, "bob", target)
    assert table.get(call_id).status is target


def test_transition_unknown_call():
    table = CallTable()
    with pytest.raises(CallNotFoundError):
        table.transition("nope", "alice", CallStatus.ENDED)


def test_third_party_cannot_transition():
    table = CallTable()
    call_id = table.create("alice", "bob")

    with pytest.raises(CallUnauthorizedError):
        table.transition(call_id, "mallory", CallStatus.ENDED)
    assert table.get(call_id).status is CallStatus.RINGING


def test_illegal_transitions_leave_status_unchanged():
    table = CallTable()
    call_id = table.create("alice", "bob")
    table.transition(call_id, "bob", CallStatus.ACTIVE)

    with pytest.raises(CallUnauthorizedError):
        table.transition(call_id, "bob", CallStatus.REJECTED)
    table.transition(call_id, "alice", CallStatus.ENDED)
    with pytest.raises(CallUnauthorizedError):
        table.transition(call_id, "alice", CallStatus.ENDED)
    with pytest.raises(CallUnauthorizedError):
        table.transition(call_id, "bob", CallStatus.ACTIVE)

    assert table.get(call_id).status is CallStatus.ENDED


def test_end_all_for_reports_other_party_and_removes():
    table = CallTable()
    live = table.create("alice", "bob")
    incoming = table.create("carol", "alice")
    finished = table.create("alice", "dave")
    table.transition(finished, "dave", CallStatus.REJECTED)
    untouched = table.create("bob", "carol")

    ended = {item.call_id: item for item in table.end_all_for("alice")}

    assert ended[live].other_party == "bob" and ended[live].was_live
    assert ended[incoming].other_party == "carol" and ended[incoming].was_live
    assert not ended[finished].was_live
    assert live not in table and incoming not in table and finished not in table
    assert untouched in table


def test_purge_removes_terminal_record_after_delay():
    async def scenario():
        table = CallTable()
        call_id = table.create("alice", "bob")
        table.transition(call_id, "alice", CallStatus.ENDED)
        table.purge_after(call_id, 0.01)

        assert call_id in table
        await asyncio.sleep(0.05)
        assert call_id not in table

    asyncio.run(scenario())


def test_purge_skips_record_that_is_not_terminal():
    async def scenario():
        table = CallTable()
        call_id = table.create("alice", "bob")
        table.purge_after(call_id, 0.01)

        await asyncio.sleep(0.05)
        assert table.get(call_id).status is CallStatus.RINGING

    asyncio.run(scenario())


def test_remove_cancels_pending_purge():
    async def scenario():
        table = CallTable()
        call_id = table.create("alice", "bob")
        table.transition(call_id, "bob", CallStatus.REJECTED)
        table.purge_after(call_id, 0.01)

        assert table.remove(call_id) is not None
        assert table._purge_timers == {}
        await asyncio.sleep(0.05)
        assert len(table) == 0

    asyncio.run(scenario())


def test_purge_after_for_missing_record_is_noop():
    async def scenario():
        table = CallTable()
        table.purge_after("gone", 0.01)
        assert table._purge_timers == {}

    asyncio.run(scenario())
