from tools.logger import *
from . import topic, guarded

NAME = "disconnect"


@topic(NAME)
def init(server, router):
    """
    Handle the 'disconnect' topic.

    Logs the user out, broadcasts the offline status and ends every call the
    user was part of, telling the other party the peer disconnected.
    """

    @server.on(NAME)
    @guarded(NAME)
    async def callback(sid, reason=None):
        log_debug(f"Connection {sid} closed ({reason})")
        await router.handle_disconnect(sid)
