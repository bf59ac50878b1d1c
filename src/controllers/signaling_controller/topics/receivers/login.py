from tools.logger import *
from . import topic, guarded

NAME = "login"


@topic(NAME)
def init(server, router):
    """
    Handle the 'login' topic to bind a user-chosen identity to the connection.

    Expected payload: the identity as a plain string, e.g. "alice".

    Replies with 'login-success' (identity) or 'login-failed' (message), and
    broadcasts 'user-status' {userId, status: "online"} on success.
    """

    @server.on(NAME)
    @guarded(NAME)
    async def callback(sid, identity=None):
        await router.handle_login(sid, identity)
