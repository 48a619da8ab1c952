"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.language import Language
from core.domain.models import DangerLevel, IdentificationResult

_DANGER_STYLES: dict[DangerLevel, str] = {
    DangerLevel.SAFE: "green",
    DangerLevel.MODERATE: "yellow",
    DangerLevel.HIGH: "red",
    DangerLevel.CRITICAL: "bold red",
}

_LABELS: dict[Language, dict[str, str]] = {
    Language.ENGLISH: {
        "title": "Identification",
        "not_found": "No confident identification.",
        "confidence": "Confidence",
        "venomous": "Venomous",
        "danger": "Danger level",
        "first_aid": "First aid",
        "suggestions": "Possible species",
        "related": "Often confused with",
        "yes": "yes",
        "no": "no",
    },
    Language.THAI: {
        "title": "ผลการระบุชนิด",
        "not_found": "ไม่สามารถระบุชนิดได้อย่างมั่นใจ",
        "confidence": "ความมั่นใจ",
        "venomous": "มีพิษ",
        "danger": "ระดับอันตราย",
        "first_aid": "การปฐมพยาบาล",
        "suggestions": "ชนิดที่เป็นไปได้",
        "related": "ชนิดที่คล้ายกัน",
        "yes": "ใช่",
        "no": "ไม่",
    },
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("SERPENT-ID", style="bold cyan")
    subtitle = Text("Snake identification • multi-model AI", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_locations_table(result: IdentificationResult) -> Table:
    table = Table(title="Locations")
    table.add_column("Country", style="white")
    table.add_column("Continent", style="cyan", no_wrap=True)
    for loc in result.locations:
        table.add_row(loc.country, loc.continent_code)
    return table


def build_result_panel(result: IdentificationResult, language: Language) -> Panel:
    """Panel para presentar el `IdentificationResult` en un idioma."""

    labels = _LABELS[language]
    localized = result.data.get(language.value)
    body = Text()

    if not result.found:
        body.append(labels["not_found"] + "\n", style="bold yellow")
        if localized and localized.description:
            body.append(localized.description + "\n")
        if result.suggestions:
            body.append(f"\n{labels['suggestions']}: ", style="bold")
            body.append(", ".join(result.suggestions) + "\n")
        body.append(f"\n{labels['confidence']}: {result.confidence:.0f}%", style="dim")
        return Panel(
            body,
            title=Text(labels["title"], style="bold yellow"),
            subtitle=Text(language.label(), style="dim"),
            border_style="yellow",
        )

    name = localized.name if localized and localized.name else result.scientific_name
    body.append(name + "\n", style="bold")
    body.append(result.scientific_name + "\n\n", style="italic dim")
    if localized and localized.description:
        body.append(localized.description.strip() + "\n\n")

    body.append(f"{labels['confidence']}: {result.confidence:.0f}%\n")
    body.append(f"{labels['venomous']}: {labels['yes'] if result.is_venomous else labels['no']}\n")
    body.append(f"{labels['danger']}: ")
    body.append(result.danger_level.value + "\n", style=_DANGER_STYLES[result.danger_level])

    if localized and localized.first_aid:
        body.append(f"\n{labels['first_aid']}:\n", style="bold")
        for step in localized.first_aid:
            body.append(f"- {step}\n")
    if result.related_species:
        body.append(f"\n{labels['related']}: ", style="bold")
        body.append(", ".join(result.related_species) + "\n")
    if result.model:
        body.append(f"\nModel: {result.model}", style="dim")

    border = _DANGER_STYLES[result.danger_level].split()[-1]
    return Panel(
        body,
        title=Text(labels["title"], style="bold cyan"),
        subtitle=Text(language.label(), style="dim"),
        border_style=border,
    )
