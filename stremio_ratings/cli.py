"""Command-line tool that enriches a single title and prints the result."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import click
import httpx

from .common.types import EnrichedRecord
from .config import Settings
from .enrichment import EnrichmentOrchestrator
from .enrichment.sources import decode_data_uri


async def enrich_title(
    item_id: str, content_type: str, settings: Settings
) -> EnrichedRecord | None:
    """Enrich *item_id* with a short-lived HTTP client."""

    async with httpx.AsyncClient(
        timeout=settings.request_timeout, follow_redirects=True
    ) as client:
        orchestrator = EnrichmentOrchestrator(client, settings)
        return await orchestrator.enrich(item_id, content_type)


@click.command()
@click.argument("item_id")
@click.option(
    "--type",
    "content_type",
    type=click.Choice(["movie", "series"]),
    default="movie",
    show_default=True,
    help="Content type of the title",
)
@click.option(
    "--poster-out",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
    help="Write the composited poster image to this file",
)
@click.option(
    "--log-level",
    envvar="LOG_LEVEL",
    show_envvar=True,
    type=click.Choice(
        ["critical", "error", "warning", "info", "debug"], case_sensitive=False
    ),
    default="info",
    show_default=True,
    help="Logging verbosity",
)
def main(
    item_id: str, content_type: str, poster_out: Path | None, log_level: str
) -> None:
    """Fetch ITEM_ID from Cinemeta, scrape its ratings and print the record."""

    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO))
    record = asyncio.run(enrich_title(item_id, content_type, Settings()))
    if record is None:
        raise click.ClickException(f"No metadata found for {item_id}")

    payload = record.to_payload()
    if poster_out is not None:
        poster = decode_data_uri(record.poster) if record.poster else None
        if poster is None:
            click.echo("Poster was not composited; nothing written", err=True)
        else:
            poster_out.write_bytes(poster)
            payload["poster"] = str(poster_out)
    payload["ratings"] = record.ratings
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
