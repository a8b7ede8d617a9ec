from __future__ import annotations

import typer

from .. import console
from ..config import config_path, load_config, normalize_base_url, save_config

app = typer.Typer(help="Show or change stored client settings.")


@app.command("show")
def show_config() -> None:
    cfg = load_config()
    token_state = "(set)" if cfg.auth.token else "(empty)"
    console.console.print(
        f"base_url={cfg.base_url} project_id={cfg.project_id or '-'} "
        f"language={cfg.language or '-'} token={token_state}"
    )
    if cfg.profiles:
        console.info(f"profiles: {', '.join(sorted(cfg.profiles))}")


@app.command("set")
def set_config(
        token: str | None = typer.Option(None, "--token", help="Azbox API key."),
        project: str | None = typer.Option(None, "--project", help="Azbox project ID."),
        language: str | None = typer.Option(None, "--language", help="Language code, e.g. EN."),
        base_url: str | None = typer.Option(None, "--base-url", help="API base URL."),
) -> None:
    cfg = load_config()

    if token is not None:
        cfg.auth.token = token.strip()
    if project is not None:
        cfg.project_id = project.strip()
    if language is not None:
        cfg.language = language.strip()
    if base_url is not None:
        cfg.base_url = normalize_base_url(base_url, warn=True)

    save_config(cfg)
    console.ok(f"Config updated ({config_path()}).")
