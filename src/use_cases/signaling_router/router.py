"""
Signaling Router

Validates inbound signaling events against the connection registry and the
call table, mutates them, and emits the resulting events to the right
connections. The transport is any object with an
``async emit(event, data, to=handle)`` method, e.g. a socketio.AsyncServer.
"""

import asyncio
from typing import Any, Optional

from tools.errors import (
    CallNotFoundError,
    CallUnauthorizedError,
    HandleAlreadyBoundError,
    IdentityTakenError,
    SelfCallError,
)
from tools.logger import log_debug, log_info, log_warning
from tools.settings import DEFAULT_CALL_PURGE_DELAY
from use_cases.call_table import CallStatus, CallTable
from use_cases.session_registry import ConnectionRegistry

PEER_DISCONNECTED_REASON = "peer disconnected"

LOGIN_TAKEN_MESSAGE = "This user ID is already in use, please choose another one"
LOGIN_INVALID_MESSAGE = "Invalid user ID"
NOT_LOGGED_IN_MESSAGE = "Please log in first"
SELF_CALL_MESSAGE = "Cannot call yourself"
CALLEE_OFFLINE_MESSAGE = "User is not online"
INVALID_REQUEST_MESSAGE = "Invalid request"
INVALID_CALL_MESSAGE = "Invalid call"


class SignalingRouter:
    """
    Event-handling core of the relay.

    Every handler runs under a single asyncio.Lock, so registry and call table
    mutations never interleave even though emits are awaited.
    """

    def __init__(
        self,
        transport,
        registry: Optional[ConnectionRegistry] = None,
        calls: Optional[CallTable] = None,
        purge_delay: float = DEFAULT_CALL_PURGE_DELAY,
    ):
        self._transport = transport
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.calls = calls if calls is not None else CallTable()
        self.purge_delay = purge_delay
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def _emit(self, event: str, data: Any, handle: str) -> None:
        """Hand one event to the transport; delivery failures drop the event."""
        try:
            await self._transport.emit(event, data, to=handle)
        except Exception as e:
            log_warning(f"Dropped '{event}' for connection {handle}: {e}")

    async def _emit_to_identity(self, event: str, data: Any, identity: str) -> bool:
        handle = self.registry.handle_for(identity)
        if handle is None:
            return False
        await self._emit(event, data, handle)
        return True

    async def _broadcast(self, event: str, data: Any) -> None:
        """Fan an event out to every attached connection."""
        for handle in self.registry.connections():
            await self._emit(event, data, handle)

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def handle_connect(self, handle: str) -> None:
        async with self._lock:
            self.registry.attach(handle)
            log_info(f"New connection: {handle}")

    async def handle_login(self, handle: str, identity: Any) -> None:
        async with self._lock:
            if not isinstance(identity, str) or not identity.strip():
                await self._emit("login-failed", LOGIN_INVALID_MESSAGE, handle)
                return

            try:
                self.registry.register(handle, identity)
            except IdentityTakenError:
                log_info(f"Login rejected, identity {identity} already in use")
                await self._emit("login-failed", LOGIN_TAKEN_MESSAGE, handle)
                return
            except HandleAlreadyBoundError as e:
                log_info(f"Login rejected on {handle}: {e.message}")
                await self._emit("login-failed", e.message, handle)
                return

            log_info(f"User {identity} logged in on {handle}")
            await self._emit("login-success", identity, handle)
            await self._broadcast("user-status", {"userId": identity, "status": "online"})

    async def handle_disconnect(self, handle: str) -> None:
        async with self._lock:
            identity = self.registry.detach(handle)
            if identity is None:
                log_debug(f"Anonymous connection {handle} closed")
                return

            log_info(f"User {identity} disconnected")
            await self._broadcast("user-status", {"userId": identity, "status": "offline"})

            for ended in self.calls.end_all_for(identity):
                if not ended.was_live:
                    continue
                await self._emit_to_identity(
                    "call-ended",
                    {"callId": ended.call_id, "reason": PEER_DISCONNECTED_REASON},
                    ended.other_party,
                )

    # ------------------------------------------------------------------
    # Call lifecycle
    # ------------------------------------------------------------------

    async def handle_call(self, handle: str, callee_id: str) -> None:
        async with self._lock:
            caller_id = self.registry.identity_for(handle)
            if caller_id is None:
                await self._emit("call-failed", NOT_LOGGED_IN_MESSAGE, handle)
                return

            if callee_id == caller_id:
                await self._emit("call-failed", SELF_CALL_MESSAGE, handle)
                return

            callee_handle = self.registry.handle_for(callee_id)
            if callee_handle is None:
                await self._emit("call-failed", CALLEE_OFFLINE_MESSAGE, handle)
                return

            try:
                call_id = self.calls.create(caller_id, callee_id)
            except SelfCallError as e:
                await self._emit("call-failed", e.message, handle)
                return

            log_info(f"User {caller_id} is calling {callee_id}, call id: {call_id}")
            await self._emit(
                "incoming-call", {"callId": call_id, "callerId": caller_id}, callee_handle
            )
            await self._emit(
                "call-initiated", {"callId": call_id, "calleeId": callee_id}, handle
            )

    async def handle_invalid_call(self, handle: str) -> None:
        """Answer a malformed call request."""
        await self._emit("call-failed", INVALID_REQUEST_MESSAGE, handle)

    async def handle_answer_call(self, handle: str, call_id: str) -> None:
        async with self._lock:
            identity = self.registry.identity_for(handle)
            record = self.calls.get(call_id)
            if record is None or identity is None or record.callee != identity:
                await self._emit("call-error", INVALID_CALL_MESSAGE, handle)
                return

            try:
                self.calls.transition(call_id, identity, CallStatus.ACTIVE)
            except (CallNotFoundError, CallUnauthorizedError) as e:
                log_debug(f"answer-call refused: {e}")
                await self._emit("call-error", INVALID_CALL_MESSAGE, handle)
                return

            caller_handle = self.registry.handle_for(record.caller)
            if caller_handle is None:
                log_debug(f"Caller of {call_id} already gone, nothing to notify")
                return

            await self._emit("call-answered", {"callId": call_id}, caller_handle)
            await self._emit("call-connected", {"callId": call_id}, handle)
            log_info(f"Call {call_id} answered")

    async def handle_invalid_answer_call(self, handle: str) -> None:
        """Answer a malformed answer-call request."""
        await self._emit("call-error", INVALID_CALL_MESSAGE, handle)

    async def handle_reject_call(self, handle: str, call_id: str) -> None:
        async with self._lock:
            identity = self.registry.identity_for(handle)
            record = self.calls.get(call_id)
            if record is None or identity is None or record.callee != identity:
                return

            try:
                self.calls.transition(call_id, identity, CallStatus.REJECTED)
            except (CallNotFoundError, CallUnauthorizedError) as e:
                log_debug(f"reject-call ignored: {e}")
                return

            self.calls.purge_after(call_id, self.purge_delay)
            if await self._emit_to_identity("call-rejected", {"callId": call_id}, record.caller):
                log_info(f"Call {call_id} rejected")

    async def handle_end_call(self, handle: str, call_id: str) -> None:
        async with self._lock:
            identity = self.registry.identity_for(handle)
            record = self.calls.get(call_id)
            if record is None or identity is None or not record.involves(identity):
                return

            try:
                self.calls.transition(call_id, identity, CallStatus.ENDED)
            except (CallNotFoundError, CallUnauthorizedError) as e:
                log_debug(f"end-call ignored: {e}")
                return

            for party in (record.caller, record.callee):
                party_handle = self.registry.handle_for(party)
                if party_handle is not None and party_handle != handle:
                    await self._emit("call-ended", {"callId": call_id}, party_handle)

            log_info(f"Call {call_id} ended by {identity}")
            self.calls.purge_after(call_id, self.purge_delay)

    # ------------------------------------------------------------------
    # Handshake relay
    # ------------------------------------------------------------------

    async def _relay(self, handle, event, call_id, key, value, role=None) -> None:
        """
        Forward an opaque handshake payload to the other party of a live call.

        role restricts the sender to "caller" or "callee"; None accepts either.
        Missing records, terminal calls and absent peers drop the event.
        """
        async with self._lock:
            sender = self.registry.identity_for(handle)
            record = self.calls.get(call_id)
            if sender is None or record is None or record.status.is_terminal:
                log_debug(f"Dropped {event} for unknown or finished call {call_id}")
                return

            if not record.involves(sender):
                log_warning(f"Dropped {event} from {sender}, not a party to {call_id}")
                return

            if role is not None and getattr(record, role) != sender:
                log_debug(f"Dropped {event} from {sender}, expected the {role}")
                return

            target = record.counterpart(sender)
            delivered = await self._emit_to_identity(
                event, {"callId": call_id, key: value, "senderId": sender}, target
            )
            if not delivered:
                log_debug(f"Dropped {event} for {call_id}, {target} is offline")

    async def handle_offer(self, handle: str, call_id: str, offer: Any) -> None:
        await self._relay(handle, "offer", call_id, "offer", offer, role="caller")

    async def handle_answer(self, handle: str, call_id: str, answer: Any) -> None:
        await self._relay(handle, "answer", call_id, "answer", answer, role="callee")

    async def handle_ice_candidate(self, handle: str, call_id: str, candidate: Any) -> None:
        await self._relay(handle, "ice-candidate", call_id, "candidate", candidate)

    def close(self) -> None:
        """Cancel deferred work owned by the router."""
        self.calls.close()
