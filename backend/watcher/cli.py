"""
WatchCompile Command Line Interface.

Compiles a source tree into an output tree, once or continuously.
Requires Python 3.11+.

Usage:
    watch-compile src/ app/ --type ts --log
"""

import argparse
import sys
from pathlib import Path

from utils.logger import configure_logging, logger
from watcher.compile_watcher import WatchCompiler, WatchOptions


def _print_changes(changed: list[str]) -> None:
    for path in changed:
        print(f"  changed: {path}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="watch-compile",
        description="Mirror a source tree into an output tree, compiling JS/TS files",
    )
    parser.add_argument("src", type=Path, help="Source directory to read from")
    parser.add_argument("out", type=Path, help="Output directory to write to")
    parser.add_argument(
        "--type",
        default=None,
        help='Compiler backend: "ts" for TypeScript, anything else for Babel',
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=None,
        help="Log a line per compiled file",
    )
    parser.add_argument(
        "--no-retain-lines",
        dest="retain_lines",
        action="store_false",
        default=None,
        help="Let Babel renumber output lines",
    )
    parser.add_argument(
        "--interval-ms",
        dest="poll_interval_ms",
        type=int,
        default=None,
        help="Delay between compile passes in milliseconds",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single compile pass and exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL (e.g. DEBUG)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if not args.src.exists():
        print(f"Error: Path does not exist: {args.src}")
        return 1

    if not args.src.is_dir():
        print(f"Error: Path is not a directory: {args.src}")
        return 1

    configure_logging(args.log_level)

    options = WatchOptions.from_settings(
        args.src.resolve(),
        args.out.resolve(),
        type=args.type,
        log=args.log,
        retain_lines=args.retain_lines,
        poll_interval_ms=args.poll_interval_ms,
    )
    compiler = WatchCompiler(options, callback=_print_changes)

    if args.once:
        compiler.compile_pass()
        if compiler.last_error is not None:
            print(f"\n{compiler.last_error}")
            for file in sorted(compiler.error_files):
                print(f"    - {file}")
            return 1
        return 0

    logger.info(
        "watching_for_changes",
        src=str(options.src_path),
        out=str(options.out_path),
        backend=compiler.backend.name,
        interval_ms=options.poll_interval_ms,
    )
    try:
        compiler.run_forever()
    except KeyboardInterrupt:
        print("\nStopped")
        compiler.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
