"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.openai_backend import resolve_api_key
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import ConfigurationError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="SERPENT-ID Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    try:
        key = resolve_api_key(settings)
        table.add_row("AI key", "OK", "local provider (dummy key)" if key == "local" else "configured")
        key_ok = True
    except ConfigurationError as exc:
        table.add_row("AI key", "FAIL", str(exc))
        key_ok = False

    table.add_row("AI base_url", "OK", settings.ai_base_url)
    table.add_row("Model pool", "OK", ", ".join(settings.ai_models))
    table.add_row(
        "Retry policy",
        "OK",
        f"{settings.retries_per_model} retries/model, {settings.min_request_interval_seconds:g}s min interval",
    )

    ok_http, detail_http = asyncio.run(_check_http(settings.ai_base_url.rstrip("/") + "/models", settings))
    table.add_row("Provider connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not key_ok:
        _console.print("\n[yellow]Tip:[/yellow] run `serpent-id doctor setup-ai` to store an API key.")


@app.command(name="setup-ai")
def setup_ai() -> None:
    """Interactive AI setup (stores config in the user config .env)."""

    provider = typer.prompt(
        "AI provider",
        default="openrouter",
        show_default=True,
    ).strip().lower()

    presets: dict[str, dict[str, str]] = {
        "openrouter": {
            "SERPENT_ID_AI_BASE_URL": "https://openrouter.ai/api/v1",
            "SERPENT_ID_AI_MODELS": '["google/gemini-2.0-flash-exp:free", "meta-llama/llama-3.2-11b-vision-instruct:free"]',
        },
        "openai": {
            "SERPENT_ID_AI_BASE_URL": "https://api.openai.com/v1",
            "SERPENT_ID_AI_MODELS": '["gpt-4o-mini", "gpt-4o"]',
        },
        "ollama": {
            "SERPENT_ID_AI_BASE_URL": "http://localhost:11434/v1",
            "SERPENT_ID_AI_MODELS": '["llava", "llama3.2-vision"]',
        },
    }

    values = presets.get(provider, {}).copy()
    if not values:
        _console.print("[yellow]Unknown provider preset. You can still enter custom values.[/yellow]")

    base_url = typer.prompt("AI base URL", default=values.get("SERPENT_ID_AI_BASE_URL", ""), show_default=True).strip()
    models = typer.prompt(
        "AI models (JSON list)", default=values.get("SERPENT_ID_AI_MODELS", ""), show_default=True
    ).strip()
    api_key = typer.prompt("AI API key", default="", hide_input=True, show_default=False).strip()

    if not base_url or not models:
        raise typer.BadParameter("base_url and models are required")

    updates = {
        "SERPENT_ID_AI_BASE_URL": base_url,
        "SERPENT_ID_AI_MODELS": models,
    }
    # Clave en blanco: se conserva la ya guardada.
    if api_key:
        updates["SERPENT_ID_AI_API_KEY"] = api_key

    env_path = write_user_env_vars(updates)

    _console.print(f"[green]Saved AI config to:[/green] {env_path}")
