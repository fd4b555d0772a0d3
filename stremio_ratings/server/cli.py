"""Command line interface for :mod:`stremio_ratings.server`."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass

import uvicorn

from . import app, settings


@dataclass
class RunConfig:
    """Runtime configuration for the uvicorn server."""

    host: str
    port: int
    log_level: str = "info"

    def to_kwargs(self) -> dict[str, object]:
        """Return keyword arguments compatible with ``uvicorn.run``."""

        return {"host": self.host, "port": self.port, "log_level": self.log_level}


def _resolve_log_level(cli_value: str | None) -> str:
    """Return the desired log level name based on CLI or environment input."""

    env_value = os.getenv("LOG_LEVEL")
    if cli_value:
        return cli_value
    if env_value:
        return env_value.lower()
    return "info"


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for running the addon server."""

    parser = argparse.ArgumentParser(description="Run the Stremio ratings addon")
    parser.add_argument(
        "--bind", default=settings.host, help="Host address to bind to (env: HOST)"
    )
    parser.add_argument(
        "--port", type=int, default=settings.port, help="Port to listen on (env: PORT)"
    )
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=["critical", "error", "warning", "info", "debug"],
        help="Logging verbosity (env: LOG_LEVEL)",
    )
    args = parser.parse_args(argv)

    env_host = os.getenv("HOST")
    env_port = os.getenv("PORT")
    host = env_host or args.bind
    port: int
    if env_port is not None:
        try:
            port = int(env_port)
        except ValueError:
            parser.error("PORT must be an integer")
    else:
        port = args.port
    if not 0 < port < 65536:
        parser.error("port must be between 1 and 65535")

    log_level_name = _resolve_log_level(args.log_level)
    logging.basicConfig(level=getattr(logging, log_level_name.upper(), logging.INFO))

    run_config = RunConfig(host=host, port=port, log_level=log_level_name)
    logging.getLogger(__name__).info(
        "Addon manifest available at http://%s:%d/manifest.json", host, port
    )
    uvicorn.run(app, **run_config.to_kwargs())


__all__ = ["RunConfig", "main", "app", "settings"]
