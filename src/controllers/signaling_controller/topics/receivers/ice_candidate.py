from tools.logger import *
from tools.contract_validation import CALL_REFERENCE, AnyType
from . import topic, guarded, validate_payload

NAME = "ice-candidate"

MESSAGE_TYPE = {
    **CALL_REFERENCE,
    "candidate": AnyType,  # Can be null for end-of-candidates
}


@topic(NAME)
def init(server, router):
    """
    Handle the 'ice-candidate' topic: relay a candidate to the other party.
    """

    @server.on(NAME)
    @guarded(NAME)
    @validate_payload(MESSAGE_TYPE, NAME)
    async def callback(sid, message):
        await router.handle_ice_candidate(sid, message["callId"], message["candidate"])
