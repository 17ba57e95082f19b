#!/usr/bin/env python3
"""Run the Study Desk API server."""

import argparse
import sys
import uvicorn
import anyio

from studydesk.api.main import create_app
from studydesk.config import load_config


def main():
    """Run the API server."""
    parser = argparse.ArgumentParser(description="Run the Study Desk API")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to settings YAML (default: configs/settings.yaml)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind to (default: from config)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (default: from config)",
    )
    parser.add_argument(
        "--library-root",
        type=str,
        default=None,
        help="Master folder to sync (default: from config or last selection)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    args = parser.parse_args()

    # Load config for defaults
    try:
        config = anyio.run(load_config, args.config)
    except Exception as e:
        print(f"Failed to load config: {e}", file=sys.stderr)
        raise SystemExit(1) from e

    if args.library_root:
        config.library.root = args.library_root
    if args.debug:
        config.api.debug = True
        config.logging.level = "DEBUG"

    host = args.host or config.api.host
    port = args.port or config.api.port

    print(f"Starting Study Desk API on http://{host}:{port}")
    print(f"  - Swagger UI: http://{host}:{port}/docs")
    print(f"  - Health: http://{host}:{port}/health")

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level="debug" if args.debug else "info",
    )


if __name__ == "__main__":
    main()
