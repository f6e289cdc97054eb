from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from json_log_viewer.core.config import DEFAULT_FORMAT, ViewerOptions, resolve_log_level
from json_log_viewer.core.errors import ViewerError
from json_log_viewer.core.models import Level
from json_log_viewer.core.pipeline import run

_COLORS = ["black", "red", "green", "yellow", "blue", "magenta", "cyan", "white"]


def _configure_logging() -> None:
    """Send diagnostics to stderr so they never mix with rendered output."""
    logging.basicConfig(
        level=resolve_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _parse_level(s: str) -> Level:
    level = Level.parse(s)
    if level is None:
        raise argparse.ArgumentTypeError(
            "Invalid level. Allowed: TRACE, DEBUG, INFO, WARN, ERROR, FATAL"
        )
    return level


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="jlv",
        description="Render JSON log lines as human-readable, colorized text.",
    )
    p.add_argument("files", nargs="*", type=Path, help="Input files (default: stdin)")
    p.add_argument(
        "-f",
        "--format",
        default=DEFAULT_FORMAT,
        help="Output template with {field} placeholders; {{ and }} are literal braces",
    )
    fields = p.add_mutually_exclusive_group()
    fields.add_argument("--add-fields", default=None, help="Comma-separated extra fields to show")
    fields.add_argument(
        "--omit-fields",
        default=None,
        help="Comma-separated extra fields to hide (all others are shown)",
    )
    p.add_argument("--color", choices=["auto", "always", "never"], default="auto")
    p.add_argument(
        "--non-json",
        choices=["passthrough", "skip", "fail"],
        default="passthrough",
        help="What to do with lines that are not valid JSON",
    )
    p.add_argument(
        "--schema",
        choices=["auto", "logstash", "logrus", "bunyan", "generic"],
        default="auto",
    )
    p.add_argument("--logger-format", choices=["short-dots", "as-is"], default="short-dots")
    p.add_argument(
        "--logger-length",
        type=int,
        default=30,
        help="Maximum logger name length, cropped from the left (0 = unlimited)",
    )
    p.add_argument("--ts-format", choices=["time", "full"], default="time")
    p.add_argument("--min-level", type=_parse_level, default=None)
    p.add_argument("--raw-json", action="store_true", help="Print records as compact JSON")
    p.add_argument("--expanded", action="store_true", help="Show extras one per line")
    p.add_argument("--key-color", choices=_COLORS, default="magenta")
    p.add_argument("--value-color", choices=_COLORS, default="cyan")
    p.add_argument("--tz", default="local", help="Display timezone: local, utc, or an IANA name")
    p.add_argument(
        "--follow",
        action="store_true",
        help="Tail the last input file, surviving rotation (earlier files are read first)",
    )
    p.add_argument("-o", "--output", type=Path, default=None, help="Write to a file instead of stdout")
    return p


def options_from_args(args: argparse.Namespace) -> ViewerOptions:
    return ViewerOptions(
        format=args.format,
        add_fields=args.add_fields,
        omit_fields=args.omit_fields,
        color=args.color,
        non_json=args.non_json,
        schema_choice=args.schema,
        logger_format=args.logger_format,
        logger_length=args.logger_length,
        ts_format=args.ts_format,
        min_level=args.min_level,
        raw_json=args.raw_json,
        expanded=args.expanded,
        key_color=args.key_color,
        value_color=args.value_color,
        tz=args.tz,
        follow=args.follow,
        files=tuple(args.files),
        output=args.output,
    )


def _silence_stdout() -> None:
    # Keep the interpreter's final flush from raising on the closed pipe.
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)
    os.close(devnull)


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        _configure_logging()
        options = options_from_args(args)
        asyncio.run(run(options))
    except BrokenPipeError:
        _silence_stdout()
        raise SystemExit(0)
    except KeyboardInterrupt:
        raise SystemExit(130)
    except ValidationError as e:
        msg = "; ".join(err["msg"] for err in e.errors())
        print(f"Error: {msg}", file=sys.stderr)
        raise SystemExit(1)
    except (ViewerError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
