"""
In-memory table of call records and their lifecycle.

A record is created in RINGING by a call request and moves through a small
state machine. Terminal records (REJECTED, ENDED) stay around for a short
grace window so late messages can be dropped cleanly, then a cancelable
timer keyed by call id purges them.
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from tools.errors import CallNotFoundError, CallUnauthorizedError, SelfCallError
from tools.logger import log_debug, log_info


class CallStatus(Enum):
    """Call record states."""
    RINGING = "ringing"     # Created, waiting for the callee
    ACTIVE = "active"       # Callee answered
    REJECTED = "rejected"   # Callee declined
    ENDED = "ended"         # Hung up or a party disconnected

    @property
    def is_terminal(self) -> bool:
        return self in (CallStatus.REJECTED, CallStatus.ENDED)


# Allowed (current -> target) moves
TRANSITIONS = {
    CallStatus.RINGING: {CallStatus.ACTIVE, CallStatus.REJECTED, CallStatus.ENDED},
    CallStatus.ACTIVE: {CallStatus.ENDED},
    CallStatus.REJECTED: set(),
    CallStatus.ENDED: set(),
}


@dataclass
class CallRecord:
    call_id: str
    caller: str
    callee: str
    status: CallStatus = CallStatus.RINGING
    created_at: float = field(default_factory=time.time)

    def involves(self, identity: str) -> bool:
        return identity in (self.caller, self.callee)

    def counterpart(self, identity: str) -> str:
        """Return the other party of the call."""
        return self.callee if identity == self.caller else self.caller


class EndedCall(NamedTuple):
    call_id: str
    other_party: str
    was_live: bool


class CallTable:
    """
    Maps call ids to call records.

    Only the caller and callee named in a record may transition it.
    """

    def __init__(self):
        self._calls: Dict[str, CallRecord] = {}
        self._purge_timers: Dict[str, asyncio.TimerHandle] = {}

    def _new_call_id(self, caller: str, callee: str) -> str:
        base = f"{caller}-{callee}-{int(time.time() * 1000)}"
        call_id = base
        suffix = 1
        while call_id in self._calls:
            call_id = f"{base}-{suffix}"
            suffix += 1
        return call_id

    def create(self, caller: str, callee: str) -> str:
        """
        Insert a new RINGING record.

        Returns:
            The generated call id

        Raises:
            SelfCallError: caller and callee are the same identity
        """
        if caller == callee:
            raise SelfCallError("Cannot call yourself", {"identity": caller})

        call_id = self._new_call_id(caller, callee)
        self._calls[call_id] = CallRecord(call_id=call_id, caller=caller, callee=callee)
        log_debug(f"Created call {call_id} ({caller} -> {callee})")
        return call_id

    def get(self, call_id: str) -> Optional[CallRecord]:
        return self._calls.get(call_id)

    def transition(self, call_id: str, actor: str, target: CallStatus) -> CallRecord:
        """
        Move a record to a new status on behalf of one of its parties.

        Raises:
            CallNotFoundError: no record for call_id
            CallUnauthorizedError: actor is not a party, or the move is illegal
        """
        record = self._calls.get(call_id)
        if record is None:
            raise CallNotFoundError(f"Call {call_id} not found", {"call_id": call_id})

        if not record.involves(actor):
            raise CallUnauthorizedError(
                f"{actor} is not a party to call {call_id}",
                {"call_id": call_id, "actor": actor},
            )

        if target not in TRANSITIONS[record.status]:
            raise CallUnauthorizedError(
                f"Call {call_id} cannot move from {record.status.value} to {target.value}",
                {"call_id": call_id, "actor": actor},
            )

        old_status = record.status
        record.status = target
        log_debug(f"Call {call_id} state: {old_status.value} -> {target.value}")
        return record

    def purge_after(self, call_id: str, delay: float) -> None:
        """
        Schedule removal of a terminal record once delay seconds have elapsed.

        Must be called from within the running event loop. A second call for
        the same id replaces the earlier timer.
        """
        if call_id not in self._calls:
            return

        self._cancel_purge(call_id)
        loop = asyncio.get_running_loop()
        self._purge_timers[call_id] = loop.call_later(delay, self._purge, call_id)

    def _purge(self, call_id: str) -> None:
        self._purge_timers.pop(call_id, None)
        record = self._calls.get(call_id)
        if record is None or not record.status.is_terminal:
            return
        del self._calls[call_id]
        log_debug(f"Purged call {call_id} ({record.status.value})")

    def _cancel_purge(self, call_id: str) -> None:
        timer = self._purge_timers.pop(call_id, None)
        if timer is not None:
            timer.cancel()

    def remove(self, call_id: str) -> Optional[CallRecord]:
        """Drop a record immediately, cancelling any pending purge."""
        self._cancel_purge(call_id)
        return self._calls.pop(call_id, None)

    def end_all_for(self, identity: str) -> List[EndedCall]:
        """
        End and remove every record involving identity.

        Live records (RINGING or ACTIVE) are marked ENDED first and reported
        with was_live=True; terminal leftovers are removed with was_live=False.
        """
        ended = []
        for record in self.calls_for(identity):
            was_live = not record.status.is_terminal
            if was_live:
                record.status = CallStatus.ENDED
            self.remove(record.call_id)
            ended.append(EndedCall(record.call_id, record.counterpart(identity), was_live))

        if ended:
            log_info(f"Ended {len(ended)} call(s) involving {identity}")
        return ended

    def calls_for(self, identity: str) -> List[CallRecord]:
        return [record for record in self._calls.values() if record.involves(identity)]

    def close(self) -> None:
        """Cancel every pending purge timer."""
        for call_id in list(self._purge_timers):
            self._cancel_purge(call_id)

    def __contains__(self, call_id):
        return call_id in self._calls

    def __len__(self):
        return len(self._calls)
