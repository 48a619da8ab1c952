"""Extracción best-effort del objeto JSON de una respuesta IA.

Los modelos suelen envolver el JSON en fences Markdown o añadir prosa antes y
después. Esto es una transformación pura texto → texto: decodificar y validar
ocurre después, así una respuesta con comentarios finales sigue siendo
recuperable.
"""

from __future__ import annotations

import re

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def _strip_fences(text: str) -> str:
    # Varias pasadas: borrar un marcador puede dejar otro formado por los backticks vecinos.
    while "```" in text:
        text = _FENCE_RE.sub("", text)
    return text


def _first_unescaped(text: str, char: str) -> int:
    idx = text.find(char)
    while idx > 0 and text[idx - 1] == "\\":
        idx = text.find(char, idx + 1)
    return idx


def extract_json_text(raw: str) -> str:
    """Devuelve el substring `{ ... }` más amplio, o el texto recortado tal cual.

    Nunca lanza. Idempotente: `extract_json_text(extract_json_text(s)) == extract_json_text(s)`.
    """

    if not isinstance(raw, str):
        return ""

    cleaned = _strip_fences(raw)
    start = _first_unescaped(cleaned, "{")
    end = cleaned.rfind("}")
    if 0 <= start < end:
        return cleaned[start : end + 1]
    return raw.strip()
