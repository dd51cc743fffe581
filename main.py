#!/usr/bin/env python3
"""Mirror host -- Entry point.

Loads mirror.yaml, bootstraps every configured module, starts them and
serves the mirror page.

Usage:
    python3 main.py                     # Bootstrap and serve on the configured port
    python3 main.py --port 9000         # Custom port
    python3 main.py --no-server         # Bootstrap, report, exit
    python3 main.py --log-level DEBUG   # Verbose logging
"""

__version__ = "1.0.0"

import argparse
import asyncio
import logging
import os
import sys

from config import DEFAULT_MODULES, POSITIONS, ROOT_DIR, SYSTEM_MODULES, VENDOR, load_config
from core import MirrorShell, NotificationBus, Orchestrator
from core.document import Document
from core.errors import ConfigError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Mirror host: modular smart-mirror dashboard",
    )
    parser.add_argument(
        "--config", default=os.path.join(ROOT_DIR, "mirror.yaml"),
        help="Path to mirror YAML config (default: mirror.yaml)",
    )
    parser.add_argument(
        "--port", type=int, default=None,
        help="Override the port from the config",
    )
    parser.add_argument(
        "--no-server", action="store_true",
        help="Bootstrap and start modules, print their state, then exit",
    )
    parser.add_argument(
        "--log-level", default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging verbosity (default: log_level from config)",
    )
    parser.add_argument(
        "--version", action="version",
        version=f"Mirror host {__version__}",
    )
    return parser.parse_args(argv)


def setup_logging(level_name: str) -> None:
    """Configure root logger with a consistent format."""
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def build(config):
    """Wire the bus, host shell and orchestrator for one run."""
    bus = NotificationBus()
    shell = MirrorShell(config, bus, POSITIONS)
    orchestrator = Orchestrator(
        shell,
        bus,
        document=Document(ROOT_DIR),
        system_modules=SYSTEM_MODULES,
        default_module_names=DEFAULT_MODULES,
        vendor=VENDOR,
        language=config.get("language", "en"),
        timeout=float(config.get("load_timeout", 30.0)),
    )
    orchestrator.translator.load_core(os.path.join(ROOT_DIR, "translations"))
    return shell, orchestrator


def main(argv=None):
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        setup_logging("ERROR")
        logging.getLogger(__name__).error("%s", exc)
        return 1

    setup_logging(args.log_level or config.get("log_level", "INFO"))
    logger = logging.getLogger(__name__)
    logger.info("Mirror host v%s starting", __version__)

    shell, orchestrator = build(config)
    modules = asyncio.run(orchestrator.run(config["modules"]))
    logger.info("%d modules running", len(modules))

    try:
        if args.no_server:
            for module in modules:
                info = module.info()
                logger.info("  %-28s %-14s %s", info.get("identifier"),
                            info.get("position") or "-", info["state"])
            return 0

        from web_app import create_app
        app = create_app(orchestrator, shell, config)
        app.run(
            host=config.get("address", "localhost"),
            port=args.port or int(config.get("port", 8080)),
            threaded=True,
        )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        orchestrator.shutdown()
        logger.info("Shutdown complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
