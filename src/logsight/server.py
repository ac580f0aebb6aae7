"""
LogSight Web Server Entry Point

Provides the `logsight-web` command to start the FastAPI server.

Usage:
    logsight-web                         # Serve data/match.log on port 3001
    logsight-web --log path/to/match.log # Serve a specific log
    logsight-web --port 8000             # Start on custom port
    logsight-web --reload                # Enable auto-reload for development
"""

import argparse
import logging
import os
from pathlib import Path

import uvicorn

from logsight.core.config import get_config

logger = logging.getLogger(__name__)


def main() -> None:
    """Start the LogSight web server."""
    config = get_config()

    parser = argparse.ArgumentParser(
        description="LogSight CS Match Log Analyzer - Web Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    logsight-web                          Start server on http://0.0.0.0:3001
    logsight-web --log match.log          Serve match.log
    logsight-web --host 127.0.0.1         Bind to localhost only
        """,
    )
    parser.add_argument(
        "--log",
        type=Path,
        default=None,
        help=f"Match log to serve (default: {config.server.log_path})",
    )
    parser.add_argument(
        "--host",
        default=config.server.host,
        help=f"Host to bind to (default: {config.server.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.server.port,
        help=f"Port to bind to (default: {config.server.port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        default=config.logging.level.lower(),
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (default: info)",
    )

    args = parser.parse_args()

    if args.log is not None:
        # The env var reaches reload workers; the config covers this process
        os.environ["LOGSIGHT_MATCH_LOG"] = str(args.log)
        config.server.log_path = str(args.log)

    logger.info("Starting LogSight web server on http://%s:%s", args.host, args.port)
    logger.info("Serving match log %s", config.server.log_path)

    uvicorn.run(
        "logsight.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
