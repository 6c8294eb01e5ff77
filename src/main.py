"""Run the identity card extraction API with uvicorn.

Host and port come from the ``api`` section of the configuration and
can be overridden on the command line. The same configuration file is
used by the application to build its extraction components.
"""

import argparse
from pathlib import Path

import uvicorn

from src.api.app import app, configure
from src.utils.config import load_config
from src.utils.logger import setup_logging


def main(argv: list[str] | None = None) -> None:
    """Parse server options and start the FastAPI application."""
    parser = argparse.ArgumentParser(description="Identity card extraction API")
    parser.add_argument("-c", "--config", type=Path, help="YAML configuration file")
    parser.add_argument("--host", help="Bind address (default from config)")
    parser.add_argument("--port", type=int, help="Bind port (default from config)")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.log_level)
    configure(args.config)
    uvicorn.run(
        app,
        host=args.host or config.api.host,
        port=args.port or config.api.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
