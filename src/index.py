## Main Execution Script
from controllers import main_signaling_task
from tools.logger import *
from tools.settings import get_settings
import argparse
import asyncio

if __name__ == "__main__":
    settings = get_settings()

    parser = argparse.ArgumentParser(description="WebRTC Signaling Relay")
    parser.add_argument(
        "-l",
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (use -l or --log-level)",
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help="Interface to listen on (defaults to $HOST or 0.0.0.0)",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=settings.port,
        help="Port to listen on (defaults to $PORT or 3000)",
    )
    args = parser.parse_args()

    set_log_level(args.log_level)

    try:
        asyncio.run(main_signaling_task(args.host, args.port))
    except KeyboardInterrupt:
        log_warning("Keyboard interrupt received. Shutting down relay.")
