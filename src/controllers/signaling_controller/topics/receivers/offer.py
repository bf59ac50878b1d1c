from tools.logger import *
from tools.contract_validation import CALL_REFERENCE, AnyType
from . import topic, guarded, validate_payload

NAME = "offer"

MESSAGE_TYPE = {
    **CALL_REFERENCE,
    "offer": AnyType,  # SDP offer, relayed untouched
}


@topic(NAME)
def init(server, router):
    """
    Handle the 'offer' topic: relay the caller's SDP offer to the callee.
    """

    @server.on(NAME)
    @guarded(NAME)
    @validate_payload(MESSAGE_TYPE, NAME)
    async def callback(sid, message):
        await router.handle_offer(sid, message["callId"], message["offer"])
