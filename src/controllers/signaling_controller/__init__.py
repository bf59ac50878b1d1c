from .topics import initialize_all
from tools.logger import *
import socketio
import logging


class PingFilter(logging.Filter):
    """Filter to suppress ping/pong keepalive messages from socketio/engineio."""

    def filter(self, record):
        message = record.getMessage().lower()
        if "ping" in message or "pong" in message:
            return False
        return True


def _configure_socketio_logging():
    """Configure socketio and engineio loggers to filter keepalive messages."""
    ping_filter = PingFilter()

    for logger_name in ["socketio", "engineio", "socketio.server", "engineio.server"]:
        logger = logging.getLogger(logger_name)
        logger.addFilter(ping_filter)


def init(server, router):
    """
    Initialize the Signaling controller by registering necessary topics.
    """
    log_info("Initializing Signaling Controller...")

    initialize_all(server, router)

    log_info("Signaling Controller initialized successfully.")


def get_server(settings):
    _configure_socketio_logging()

    server = socketio.AsyncServer(
        async_mode="aiohttp",
        cors_allowed_origins=settings.cors_setting,
        logger=True,
        engineio_logger=False,
    )

    return server
