#!/usr/bin/env python3
"""
pip-follow command-line interface.

Make Picture-in-Picture windows follow workspace focus on niri and sway.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import load_config
from .daemon import LOG_LEVELS, main_async, setup_logging
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pip-follow",
        description="Make Picture-in-Picture windows persist across workspaces",
    )
    parser.add_argument(
        "-l", "--log-level",
        choices=list(LOG_LEVELS),
        help="Set the log level [default: info]",
    )
    parser.add_argument("-c", "--config", type=Path, help="Path to config.toml")
    parser.add_argument("--title", help="Title pattern (regex:, glob: or literal:)")
    parser.add_argument("--app-id", help="App ID pattern (regex:, glob: or literal:)")
    parser.add_argument("--backend", choices=["auto", "niri", "sway"], help="Compositor backend [default: auto]")
    parser.add_argument("--socket", type=Path, help="Compositor IPC socket path")
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"pip-follow {__version__}",
        help="Print version information",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(
            config_path=args.config,
            overrides={
                "log_level": args.log_level,
                "title": args.title,
                "app_id": args.app_id,
                "backend": args.backend,
                "socket_path": args.socket,
            },
        )
    except ConfigurationError as e:
        print(f"pip-follow: {e.message}", file=sys.stderr)
        if e.suggestion:
            print(f"  → {e.suggestion}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.log_level)
    logger.debug(f"Following windows with title {config.title!r} and app_id {config.app_id!r}")

    try:
        exit_code = asyncio.run(main_async(config))
        sys.exit(exit_code)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)

    except Exception as e:
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
