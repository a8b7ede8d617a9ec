from __future__ import annotations

import asyncio
from datetime import datetime

import httpx
import typer
from rich.table import Table
from azbox_client import ApiError, ConfigurationError, KeywordClient, KeywordRecord, UnexpectedResponseShapeError

from .. import console
from ..config import load_config
from ..http import make_client

app = typer.Typer(help="Read project keywords.")


def _parse_after(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        console.err(f"Invalid --after value '{value}', expected an ISO-8601 timestamp.")
        raise typer.Exit(code=2)


async def _fetch(client: KeywordClient, after: datetime | None) -> list[KeywordRecord]:
    async with client:
        return await client.fetch_keywords(after_updated_at=after)


@app.command("list")
def list_keywords(
        after: str | None = typer.Option(None, "--after", help="Only keywords updated after this ISO timestamp."),
        project: str | None = typer.Option(None, "--project", help="Override project ID."),
        language: str | None = typer.Option(None, "--language", help="Override language code."),
        profile: str | None = typer.Option(None, "--profile", help="Use a named profile from the config file."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    after_dt = _parse_after(after)
    cfg = load_config()

    try:
        client = make_client(
            cfg,
            profile=profile,
            base_url_override=base_url,
            project_override=project,
            language_override=language,
        )
    except ConfigurationError as e:
        console.err(f"Client is not configured: {e}. Use 'azbox config set'.")
        raise typer.Exit(code=2)

    try:
        items = asyncio.run(_fetch(client, after_dt))
    except ApiError as e:
        if e.status_code in (401, 403):
            console.err("Unauthorized. Check the API token.")
            raise typer.Exit(code=2)
        console.err(f"Failed to fetch keywords: {e}")
        raise typer.Exit(code=2)
    except UnexpectedResponseShapeError as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    except ValueError as e:
        console.err(f"Response is not valid JSON: {e}")
        raise typer.Exit(code=2)
    except httpx.HTTPError as e:
        console.err(f"Request failed: {e}")
        raise typer.Exit(code=2)

    if json_out:
        console.print_json(items)
        return

    console.info(f"total={len(items)} project={client.config.project_id} language={client.config.language}")

    table = Table(title="Keywords")
    table.add_column("id", style="bold")
    table.add_column("translation")
    table.add_column("updatedAt")

    for k in items:
        data = k.get("data") if isinstance(k, dict) else None
        data = data if isinstance(data, dict) else {}
        key_id = str(k.get("id", "-")) if isinstance(k, dict) else "-"
        table.add_row(key_id, str(data.get("translation") or "-"), str(data.get("updatedAt") or "-"))

    console.console.print(table)
