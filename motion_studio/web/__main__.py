"""Entry point for the web server.

Usage:
    python -m motion_studio.web [--port PORT] [--host HOST]
"""

import argparse
import sys


def main() -> int:
    """Run the web server."""
    parser = argparse.ArgumentParser(
        description="Motion Studio API server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--port", type=int, default=None, help="Port to run the server on (default: config)")
    parser.add_argument("--host", type=str, default=None, help="Host to bind to (default: config)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    # Import here to avoid loading FastAPI before parsing args
    import uvicorn
    from dotenv import load_dotenv

    load_dotenv()

    from ..log import setup_logging
    from .backend.dependencies import get_config

    setup_logging("DEBUG" if args.verbose else "INFO")

    # Update config with CLI args
    config = get_config()
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port

    uvicorn.run(
        "motion_studio.web.backend.app:create_app",
        host=config.server.host,
        port=config.server.port,
        reload=args.reload,
        factory=True,
        log_config=None,
    )

    return 0


if __name__ == "__main__":
    sys.exit(main())
