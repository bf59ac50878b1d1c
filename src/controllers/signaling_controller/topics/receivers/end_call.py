from tools.logger import *
from tools.contract_validation import CALL_REFERENCE
from . import topic, guarded, validate_payload

NAME = "end-call"

MESSAGE_TYPE = {**CALL_REFERENCE}


@topic(NAME)
def init(server, router):
    """
    Handle the 'end-call' topic sent by either party to hang up.
    """

    @server.on(NAME)
    @guarded(NAME)
    @validate_payload(MESSAGE_TYPE, NAME)
    async def callback(sid, message):
        await router.handle_end_call(sid, message["callId"])
