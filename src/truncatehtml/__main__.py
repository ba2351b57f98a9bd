"""Command line entry point: truncate an HTML file or stdin."""

import argparse
import logging
import signal
import sys
from pathlib import Path

from .tokens import UnbalancedTagsError
from .truncator import TruncateOpts, truncate


def build_parser():
    parser = argparse.ArgumentParser(
        prog="truncatehtml",
        description="Truncate HTML to a number of visible characters, closing any open tags.",
    )
    parser.add_argument("file", nargs="?", help="HTML file to read (default: stdin)")
    parser.add_argument(
        "-n",
        "--max-chars",
        type=int,
        default=100,
        help="Maximum number of visible characters (default: 100)",
    )
    parser.add_argument("-s", "--suffix", default="", help="Text inserted before the closing tags, e.g. '...'")
    parser.add_argument(
        "--no-trailing-comment",
        action="store_true",
        help="Do not re-append a comment that ends the input",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug information to stderr")
    return parser


def _reset_sigpipe():
    # If stdout is a pipe and the reader (e.g. `head`) closes early, exit quietly
    # instead of raising BrokenPipeError at interpreter shutdown.
    try:  # pragma: no cover - platform dependent
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)
    except (AttributeError, OSError, ValueError):  # non-Unix, or not the main thread
        pass


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.max_chars < 0:
        parser.error("--max-chars must not be negative")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Input and output are UTF-8 bytes whatever the locale encoding is.
    html = Path(args.file).read_bytes() if args.file else sys.stdin.buffer.read()
    opts = TruncateOpts(suffix=args.suffix, keep_trailing_comment=not args.no_trailing_comment)

    try:
        result = truncate(html, args.max_chars, opts=opts)
    except (UnbalancedTagsError, UnicodeDecodeError) as exc:
        print(f"truncatehtml: {exc}", file=sys.stderr)
        return 1

    if result and not result.endswith(b"\n"):
        result += b"\n"
    sys.stdout.buffer.write(result)
    sys.stdout.buffer.flush()
    return 0


def cli():
    _reset_sigpipe()
    sys.exit(main())


if __name__ == "__main__":
    cli()
