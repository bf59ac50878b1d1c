from tools.logger import *
from tools.contract_validation import CALL_REFERENCE
from . import topic, guarded, validate_payload

NAME = "reject-call"

MESSAGE_TYPE = {**CALL_REFERENCE}


@topic(NAME)
def init(server, router):
    """
    Handle the 'reject-call' topic sent by the callee to decline a ringing call.
    """

    @server.on(NAME)
    @guarded(NAME)
    @validate_payload(MESSAGE_TYPE, NAME)
    async def callback(sid, message):
        await router.handle_reject_call(sid, message["callId"])
