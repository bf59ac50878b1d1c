from tools.logger import *
from tools.contract_validation import CALL_REFERENCE
from . import topic, guarded, validate_payload

NAME = "answer-call"

MESSAGE_TYPE = {**CALL_REFERENCE}


@topic(NAME)
def init(server, router):
    """
    Handle the 'answer-call' topic sent by the callee to accept a ringing call.
    """

    @server.on(NAME)
    @guarded(NAME)
    @validate_payload(MESSAGE_TYPE, NAME, on_invalid=router.handle_invalid_answer_call)
    async def callback(sid, message):
        await router.handle_answer_call(sid, message["callId"])
