"""Exportación JSON del resultado.

Por qué JSON:
- Mismo formato snake_case que el proveedor IA: interoperable con otras
  herramientas y con el historial del cliente.
- Permite persistir resultados sin depender del render de la CLI.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import IdentificationResult


def result_to_json(result: IdentificationResult) -> str:
    payload = result.model_dump(mode="json")
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def export_result_json(*, result: IdentificationResult, output_path: Path) -> Path:
    """Exporta `IdentificationResult` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result_to_json(result), encoding="utf-8")
    return output_path
