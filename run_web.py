#!/usr/bin/env python3
"""
Entry point for running the battle arena web server.

Usage:
    python run_web.py [--host HOST] [--port PORT] [--reload]

Examples:
    python run_web.py                    # Run on localhost:8000
    python run_web.py --port 3000        # Run on localhost:3000
    python run_web.py --host 0.0.0.0     # Allow external connections
    python run_web.py --reload           # Auto-reload on code changes

Defaults come from HOST, PORT, ARENA_DATA_DIR and LOG_LEVEL.
"""
import argparse
import logging

import uvicorn

from arena import config


def main():
    parser = argparse.ArgumentParser(description="Run the battle arena web server")
    parser.add_argument(
        "--host",
        type=str,
        default=config.HOST,
        help=f"Host to bind to (default: {config.HOST})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.PORT,
        help=f"Port to bind to (default: {config.PORT})"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        default=config.RELOAD,
        help="Enable auto-reload on code changes"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print(f"Starting battle arena server at http://{args.host}:{args.port}")
    print(f"API documentation: http://{args.host}:{args.port}/docs")
    print()

    uvicorn.run(
        "arena.web.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=config.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
