from tools.logger import *
from tools.contract_validation import StringType
from . import topic, guarded, validate_payload

NAME = "call"

MESSAGE_TYPE = {
    "calleeId": StringType,
}


@topic(NAME)
def init(server, router):
    """
    Handle the 'call' topic to start ringing another logged-in user.

    Expected payload:
    {
        "calleeId": "bob"
    }

    The callee receives 'incoming-call' {callId, callerId} and the caller
    receives 'call-initiated' {callId, calleeId}; otherwise the caller gets
    'call-failed' with a human-readable message.
    """

    @server.on(NAME)
    @guarded(NAME)
    @validate_payload(MESSAGE_TYPE, NAME, on_invalid=router.handle_invalid_call)
    async def callback(sid, message):
        await router.handle_call(sid, message["calleeId"])
