"""Unified entry point for wsm.

This module starts one of the interfaces:
- CLI (default)
- REST API server
"""

import argparse
import sys


def main(argv: list[str] | None = None):
    """Main entry point with interface selection."""
    parser = argparse.ArgumentParser(
        description="wsm - move, copy and delete tabs between Obsidian workspaces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Interfaces:
  cli         Run a CLI command (default)
  api         Start the REST API server

Examples:
  python -m wsm.main cli workspaces --vault ~/Notes
  python -m wsm.main api
  python -m wsm.main api --port 8080
""",
    )

    parser.add_argument(
        "interface",
        nargs="?",
        default="cli",
        choices=["cli", "api"],
        help="Which interface to start (default: cli)",
    )

    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind API server to (default: 127.0.0.1)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for API server (default: 5005)",
    )

    args, rest = parser.parse_known_args(argv)

    if args.interface == "api":
        import uvicorn

        from wsm.core.config import (
            WSM_HOST,
            WSM_PORT,
            setup_logging,
            validate_api_environment,
        )

        setup_logging()
        is_valid, message = validate_api_environment()
        if not is_valid:
            print(f"Error: {message}")
            sys.exit(1)

        host = args.host or WSM_HOST or "127.0.0.1"
        port = args.port or WSM_PORT

        print(f"Starting wsm API server on {host}:{port}")
        uvicorn.run(
            "wsm.api.app:app",
            host=host,
            port=port,
            reload=False,
        )

    else:
        from wsm.interfaces.cli.app import app

        app(args=rest, prog_name="wsm")


if __name__ == "__main__":
    main()
