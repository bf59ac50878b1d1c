from __future__ import annotations

from controllers.signaling_controller.topics import initialize_all
from use_cases.signaling_router import PEER_DISCONNECTED_REASON

from conftest import FakeServer


def test_full_call_between_two_users(router, transport, run):
    server = FakeServer()
    initialize_all(server, router)
    on = server.handlers

    async def scenario():
        await on["connect"]("sid-a", {})
        await on["connect"]("sid-b", {})
        await on["login"]("sid-a", "A")
        await on["login"]("sid-b", "B")

        await on["call"]("sid-a", {"calleeId": "B"})
        (_, incoming), = transport.received("sid-b", "incoming-call")
        call_id = incoming["callId"]
        assert incoming == {"callId": call_id, "callerId": "A"}

        await on["answer-call"]("sid-b", {"callId": call_id})
        assert transport.payloads("sid-a", "call-answered") == [{"callId": call_id}]
        assert transport.payloads("sid-b", "call-connected") == [{"callId": call_id}]

        await on["offer"]("sid-a", {"callId": call_id, "offer": "sdp1"})
        assert transport.payloads("sid-b", "offer") == [
            {"callId": call_id, "offer": "sdp1", "senderId": "A"}
        ]

        await on["answer"]("sid-b", {"callId": call_id, "answer": "sdp2"})
        assert transport.payloads("sid-a", "answer") == [
            {"callId": call_id, "answer": "sdp2", "senderId": "B"}
        ]

        await on["ice-candidate"]("sid-a", {"callId": call_id, "candidate": "c-a"})
        await on["ice-candidate"]("sid-b", {"callId": call_id, "candidate": "c-b"})
        assert transport.payloads("sid-b", "ice-candidate") == [
            {"callId": call_id, "candidate": "c-a", "senderId": "A"}
        ]
        assert transport.payloads("sid-a", "ice-candidate") == [
            {"callId": call_id, "candidate": "c-b", "senderId": "B"}
        ]

        transport.clear()
        await on["disconnect"]("sid-a", "transport close")
        assert transport.payloads("sid-b", "call-ended") == [
            {"callId": call_id, "reason": PEER_DISCONNECTED_REASON}
        ]
        assert transport.payloads("sid-b", "user-status") == [
            {"userId": "A", "status": "offline"}
        ]
        assert call_id not in router.calls

    run(scenario())
