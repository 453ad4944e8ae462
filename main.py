# main.py

"""Entry point for the amazon_link_card generator (TUI, CLI or API server)."""

import argparse
import logging
import sys
from pathlib import Path

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("link_card.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="amazon_link_card",
        description="Generate embeddable link cards for Amazon products.",
        epilog="Run without arguments to launch the interactive TUI.",
    )
    parser.add_argument(
        "url",
        nargs="?",
        default=None,
        help="Amazon product URL (or amzn.to / a.co short link).",
    )
    parser.add_argument(
        "-c",
        "--cookie",
        default=None,
        help="Session cookie to send (default: the saved cookie, if any).",
    )
    parser.add_argument(
        "-t",
        "--tag",
        default=Settings.AFFILIATE_TAG or None,
        help="Affiliate tag to put on the card URL.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["html", "json"],
        default="html",
        dest="output_format",
        help="Output format (default: html).",
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Read a saved product page instead of fetching URL.",
    )
    parser.add_argument(
        "--save-cookie",
        default=None,
        dest="save_cookie",
        metavar="COOKIE",
        help="Save a session cookie for later fetches.",
    )
    parser.add_argument(
        "--cookie-days",
        type=int,
        default=Settings.COOKIE_EXPIRY_DAYS,
        dest="cookie_days",
        help="Days until a saved cookie expires (default: %(default)s).",
    )
    parser.add_argument(
        "--forget-cookie",
        action="store_true",
        default=False,
        dest="forget_cookie",
        help="Delete the saved session cookie.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        default=False,
        help="Run the metadata HTTP API.",
    )
    parser.add_argument("--host", default=Settings.API_HOST)
    parser.add_argument("--port", type=int, default=Settings.API_PORT)
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show INFO logs on the console.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import LinkCardApp

    try:
        app = LinkCardApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("amazon_link_card TUI shutting down")


def _run_cli(args: argparse.Namespace) -> int:
    """Dispatch a headless command and return its exit code."""
    from src.cli import runner

    if args.save_cookie is not None:
        return runner.run_save_cookie(args.save_cookie, args.cookie_days)
    if args.forget_cookie:
        return runner.run_forget_cookie()
    if args.serve:
        return runner.run_server(args.host, args.port)
    if args.file is not None:
        return runner.cli_extract_file(
            args.file, args.url, args.tag, args.output_format
        )
    return runner.cli_fetch(
        args.url, args.cookie, args.tag, args.output_format
    )


def main() -> None:
    """Route to the TUI (no args) or a headless command."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(verbose=args.verbose)
    logger.info("amazon_link_card starting, log file: %s", log_file)

    if args.file is not None and args.url is None:
        parser.error("--file needs the page URL as well")

    headless = (
        args.url is not None
        or args.save_cookie is not None
        or args.forget_cookie
        or args.serve
    )
    if not headless:
        _run_tui()
        return
    sys.exit(_run_cli(args))


if __name__ == "__main__":
    main()
