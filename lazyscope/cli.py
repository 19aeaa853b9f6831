"""Command-line front door for lazyscope.

Builds the seed value from a JSON file or a Python expression, then hands it
to the session runtime, interactively or from a key script. The returned
subject is pretty-printed on stdout.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import pprint
import sys
from pathlib import Path
from typing import Any

from .api import scry, scry_resume
from .errors import LazyScopeError
from .panels.tree_panel import DEAD_CENTER
from .runtime.config import load_settings
from .ui_theme import available_theme_names

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(log_file: str | None, level: str) -> None:
    """Attach a file handler; a full-screen UI leaves no room for stderr logs."""
    if log_file is None:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("lazyscope")
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


def load_seed(path: str | None, expr: str | None, namespace: dict[str, Any]) -> Any:
    """Return the value to browse from exactly one of ``path`` or ``expr``."""
    if path is not None and expr is not None:
        raise SystemExit("Cannot combine PATH with --expr.")
    if expr is not None:
        try:
            return eval(expr, namespace)
        except Exception as exc:
            raise SystemExit(f"Could not evaluate --expr: {type(exc).__name__}: {exc}") from exc
    if path is None:
        raise SystemExit("Provide a JSON PATH or --expr EXPR.")
    target = Path(path)
    if not target.exists():
        raise SystemExit(f"Path not found: {target}")
    try:
        return json.loads(target.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Could not read JSON from {target}: {exc}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyscope",
        description="Browse a JSON document or a Python value as a lazily expanded tree.",
    )
    parser.add_argument("path", nargs="?", default=None, help="JSON file to browse.")
    parser.add_argument("--expr", default=None, help="Python expression whose value is browsed.")
    parser.add_argument(
        "--actions",
        default=None,
        metavar="SCRIPT",
        help="Whitespace separated keys replayed without a terminal, e.g. 'l j j ENTER'.",
    )
    parser.add_argument(
        "--resume",
        nargs="?",
        const="",
        default=None,
        metavar="SCRIPT",
        help="After the first run, re-enter the same session (scripted when SCRIPT is given).",
    )
    parser.add_argument("--style", default=None, help="Pygments style name for lens highlighting.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--dead-center", action="store_true", help="Keep the cursor row centred.")
    parser.add_argument("--log-file", default=None, help="Write diagnostic logs to this file.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Log level for --log-file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, run the session, and print the returned subject."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_file, args.log_level)

    namespace: dict[str, Any] = {"__name__": "__lazyscope__"}
    seed = load_seed(args.path, args.expr, namespace)

    settings = load_settings()
    if args.style:
        settings = dataclasses.replace(settings, pygments_style=args.style)
    if args.dead_center:
        settings = dataclasses.replace(settings, cursor_tracking=DEAD_CENTER)

    options = {"settings": settings, "theme_name": args.theme, "no_color": args.no_color}
    try:
        result = scry(seed, args.actions, namespace=namespace, **options)
        if args.resume is not None:
            result = scry_resume(args.resume or None, **options)
    except LazyScopeError as exc:
        raise SystemExit(f"lazyscope: {exc}") from exc
    if result is not None:
        sys.stdout.write(pprint.pformat(result) + "\n")


if __name__ == "__main__":
    main()
