"""CodeDrop CLI entry point."""

import argparse
import os
from pathlib import Path
from typing import List, Optional

from dropcli.commands import configure_client
from dropcli.repl import repl_loop
from dropcommon.logging_config import setup_logging


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='codedrop', description='Share text and files with short codes.')
    parser.add_argument('--debug', action='store_true', help='Log debug output to stdout')
    parser.add_argument('--server', metavar='URL', help='Server URL for this session, e.g. http://drop.lan:8000')
    parser.add_argument('--config', metavar='PATH', type=Path, help='Config file (default ~/.codedrop/config.json)')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Parse options, set up the shared client and run the REPL."""
    args = build_arg_parser().parse_args(argv)
    log_level = 'DEBUG' if args.debug else os.getenv('LOG_LEVEL', 'WARNING')
    logger = setup_logging('dropcli', log_level=log_level)

    client = configure_client(config_path=args.config, server_url=args.server)
    logger.info(f"CLI starting against {client.base_url}")
    try:
        repl_loop()
    finally:
        client.close()


if __name__ == "__main__":
    main()
