"""CLI principal (Typer).

Por qué una CLI fina:
- Toda la lógica vive en `core`; aquí solo se traducen opciones a una
  `IdentificationRequest` y los dos errores públicos a códigos de salida.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.json_exporter import export_result_json, result_to_json
from cli.doctor import app as doctor_app
from cli.ui_components import build_locations_table, build_result_panel, print_banner
from core.config import AppSettings
from core.domain.errors import AllBackendsUnavailable, ConfigurationError
from core.domain.language import Language
from core.domain.models import InputKind
from core.logger import configure_logging
from core.services.identification_pipeline import identify_species

app = typer.Typer(no_args_is_help=True, help="Snake species identification through a pool of AI models.")
app.add_typer(doctor_app, name="doctor")

_console = Console()


@app.command()
def identify(
    image: Path | None = typer.Option(None, "--image", "-i", dir_okay=False, help="Photo to identify."),
    text: str | None = typer.Option(None, "--text", "-t", help="Free-text species name or description."),
    lang: Language | None = typer.Option(None, "--lang", "-l", help="Language for the rendered result."),
    json_out: Path | None = typer.Option(None, "--json-out", help="Also write the result as JSON."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result instead of panels."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
) -> None:
    """Identify a snake from a photo or a text query."""

    if (image is None) == (text is None):
        raise typer.BadParameter("pass exactly one of --image or --text")

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    language = lang or settings.default_language

    if image is not None:
        if not image.is_file():
            raise typer.BadParameter(f"image not found: {image}")
        payload: bytes | str = image.read_bytes()
        kind = InputKind.IMAGE
    else:
        payload = text or ""
        kind = InputKind.TEXT

    try:
        result = asyncio.run(identify_species(payload, kind, settings=settings))
    except ValidationError as exc:
        raise typer.BadParameter(exc.errors()[0].get("msg", "invalid input")) from exc
    except ConfigurationError as exc:
        _console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    except AllBackendsUnavailable as exc:
        _console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    if json_out is not None:
        path = export_result_json(result=result, output_path=json_out)
        _console.print(f"[green]Saved JSON to:[/green] {path}")

    if as_json:
        typer.echo(result_to_json(result), nl=False)
        return

    print_banner(_console)
    _console.print(build_result_panel(result, language))
    if result.found and result.locations:
        _console.print(build_locations_table(result))


def run() -> None:
    app()
