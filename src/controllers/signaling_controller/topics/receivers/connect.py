from tools.logger import *
from . import topic, guarded

NAME = "connect"


@topic(NAME)
def init(server, router):
    """
    Handle the 'connect' topic to add the connection to the broadcast set.
    """

    @server.on(NAME)
    @guarded(NAME)
    async def callback(sid, environ=None, auth=None):
        await router.handle_connect(sid)
