from .signaling_controller import (
    init as init_signaling_controller,
    get_server as get_signaling_server,
)
from tools.logger import *
from tools.settings import get_settings
from use_cases.signaling_router import SignalingRouter
from aiohttp import web
import asyncio


def create_app(settings=None):
    """
    Build the aiohttp application with the Socket.IO server attached.

    Returns:
        Tuple of (web.Application, SignalingRouter)
    """
    settings = settings or get_settings()

    server = get_signaling_server(settings)
    router = SignalingRouter(server, purge_delay=settings.call_purge_delay)
    init_signaling_controller(server, router)

    app = web.Application()
    server.attach(app)

    async def on_cleanup(app):
        router.close()
        log_info("Pending call purges cancelled")

    app.on_cleanup.append(on_cleanup)
    return app, router


async def main_signaling_task(host, port):
    """
    Main function to serve the signaling relay until cancelled.
    """
    app, _ = create_app()

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    log_info(f"Signaling relay running at http://{host}:{port}")

    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
