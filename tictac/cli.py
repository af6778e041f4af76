"""
Tictac CLI - Command-line interface for the game service.

Usage:
    tictac serve [--host HOST] [--port PORT]   Run the API server
    tictac classify <board>                    Classify a board, e.g. "XXX.O.O.."
"""

import argparse
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tictac - Two-player 3x3 game service",
        prog="tictac",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", help="Bind address (default from settings)")
    serve_parser.add_argument("--port", type=int, help="Bind port (default from settings)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Classify command
    classify_parser = subparsers.add_parser("classify", help="Classify a board")
    classify_parser.add_argument(
        "board",
        help='9 cells, row-major; "." is empty, any other character is a player mark',
    )

    args = parser.parse_args(argv)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "classify":
        cmd_classify(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API server with uvicorn."""
    import uvicorn

    from .config import configure_logging, get_settings

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "tictac.api.app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def cmd_classify(args):
    """Print the classification of a board."""
    from .engine_core import classify_board, parse_board

    try:
        board = parse_board(args.board)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    print(classify_board(board))


if __name__ == "__main__":
    main()
