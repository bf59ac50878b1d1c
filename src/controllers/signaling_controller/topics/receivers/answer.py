from tools.logger import *
from tools.contract_validation import CALL_REFERENCE, AnyType
from . import topic, guarded, validate_payload

NAME = "answer"

MESSAGE_TYPE = {
    **CALL_REFERENCE,
    "answer": AnyType,  # SDP answer, relayed untouched
}


@topic(NAME)
def init(server, router):
    """
    Handle the 'answer' topic: relay the callee's SDP answer to the caller.
    """

    @server.on(NAME)
    @guarded(NAME)
    @validate_payload(MESSAGE_TYPE, NAME)
    async def callback(sid, message):
        await router.handle_answer(sid, message["callId"], message["answer"])
