"""Command-line front door for yappad.

Parses CLI options, resolves the vault directory and starting mode, then
dispatches into the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .modes import BucketMode
from .preview.syntax import DEFAULT_STYLE
from .runtime import run_app
from .runtime.config import load_style, load_vault_dir

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yappad",
        description="Browse, preview and edit markdown journal notes in the terminal.",
    )
    parser.add_argument(
        "vault",
        nargs="?",
        default=None,
        help="Vault directory. Defaults to the configured vault or ~/.YapPad.",
    )
    parser.add_argument(
        "--mode",
        default="all",
        help="Starting journal mode: all, daily, weekly, monthly, yearly (or 0-4).",
    )
    parser.add_argument("--style", default=None, help="Pygments style name for the preview.")
    parser.add_argument("--no-color", action="store_true", help="Disable syntax colors in the preview.")
    parser.add_argument("--log-file", metavar="PATH", default=None, help="Write debug logs to PATH.")
    return parser


def configure_logging(log_file: str | None) -> None:
    """Attach a DEBUG file handler to the package logger when requested."""
    if not log_file:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("yappad")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and launch the note browser.

    Fatal startup problems raise ``SystemExit`` with a message. Any other
    failure escaping the runtime is logged and reported as ``error: ...``
    with exit status 1.
    """
    args = build_parser().parse_args(argv)
    try:
        configure_logging(args.log_file)
    except OSError as exc:
        raise SystemExit(f"error: cannot open log file {args.log_file}: {exc}") from exc

    try:
        bucket = BucketMode.parse(args.mode)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc

    vault_root = Path(args.vault).expanduser() if args.vault else load_vault_dir()
    style = args.style or load_style() or DEFAULT_STYLE
    try:
        run_app(vault_root.absolute(), bucket, style, args.no_color)
    except (SystemExit, KeyboardInterrupt):
        raise
    except Exception as exc:
        logging.getLogger(__name__).exception("fatal runtime error")
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
