import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import VERSION, load_config
from .game.errors import ConfigError
from .mud.server import run_server

log = logging.getLogger("tinymud")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Tiny MUD server")
    ap.add_argument("--config", help="YAML config file")
    ap.add_argument("--host", help="bind address (default: 0.0.0.0)")
    ap.add_argument("--port", type=int, help="bind port (default: 4000)")
    ap.add_argument("--log-level", default="INFO", help="log level (default: INFO)")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    log.info("Tiny MUD server version %s", VERSION)

    try:
        config = load_config(args.config, host=args.host, port=args.port)
    except ConfigError as e:
        log.error("%s", e)
        return 2

    try:
        asyncio.run(run_server(config))
    except OSError as e:
        log.error("Cannot initialise comms: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
