"""Prompts y cuerpos de petición para el proveedor IA.

Responsabilidad:
- Construir el cuerpo OpenAI-compatible (`model`, `messages`, `temperature`,
  `max_tokens`) para consultas por imagen o por texto.
- Describir el contrato JSON de salida (snake_case) dentro del prompt, ya que
  no todos los modelos del pool soportan respuestas con schema estructurado.
"""

from __future__ import annotations

import copy
from typing import Any

from core.domain.models import IdentificationRequest, InputKind

PRECHECK_POSITIVE = "snake_present"

_SYSTEM_INSTRUCTION = (
    "You are an expert herpetologist specializing in Asian and global snake species, with the depth of "
    "'A Field Guide to the Reptiles of Thailand'.\n\n"
    "CRITICAL INSTRUCTIONS FOR ACCURACY:\n"
    "1. Only identify if you are HIGHLY confident (85%+ certainty).\n"
    "2. If confidence is below 85%, set \"found\" to false.\n"
    "3. Use morphological features: head shape, scale patterns, color bands, size, eye position.\n"
    "4. Consider regional context: prioritize species found in that region.\n"
    "5. \"description\": use VERY SIMPLE, non-technical language for general audiences.\n"
    "6. \"locations\": list up to 8 key countries/regions where this snake lives.\n"
    "7. Provide accurate translations for text fields in English (en) and Thai (th).\n"
    "8. \"details\": populate with comprehensive field guide information for both languages "
    "(thai_names: common Thai names; other_names: alternative English names; active_time: Diurnal, "
    "Nocturnal or Crepuscular; venom_toxicity: venom type and clinical effects; danger_to_humans: "
    "detailed danger assessment).\n"
    "9. If unsure about ANY aspect, be conservative and set \"found\" to false. When several species "
    "are plausible, list them in \"suggestions\" and set \"needs_clarification\" to true.\n"
)

_LOCALIZED_SHAPE = (
    '{"name": "", "description": "", "first_aid": [""], "toxicity_details": "", '
    '"fun_fact": "", "habitat_text": ""}'
)
_DETAIL_SHAPE = (
    '{"scientific_name": "", "family": "", "thai_names": [""], "other_names": [""], "range": "", '
    '"habitat": "", "active_time": "", "diet": "", "venom_toxicity": "", "danger_to_humans": "", '
    '"prevention": "", "behavior": ""}'
)

_OUTPUT_FORMAT = (
    "OUTPUT FORMAT: STRICT JSON only (no extra text, no fences), with exactly these keys:\n"
    "{\n"
    '  "found": true,\n'
    '  "needs_clarification": false,\n'
    '  "suggestions": [""],\n'
    '  "related_species": [""],\n'
    '  "scientific_name": "",\n'
    '  "confidence": 0,\n'
    '  "is_venomous": false,\n'
    '  "danger_level": "Safe | Moderate | High | Critical",\n'
    '  "locations": [{"country": "", "continent_code": "AS | AF | NA | SA | EU | OC"}],\n'
    '  "search_term": "",\n'
    f'  "data": {{"en": {_LOCALIZED_SHAPE}, "th": {_LOCALIZED_SHAPE}}},\n'
    f'  "details": {{"en": {_DETAIL_SHAPE}, "th": {_DETAIL_SHAPE}}}\n'
    "}\n"
    '"confidence" is a number from 0 to 100.'
)

_IMAGE_TASK = (
    "Identify this snake with high accuracy. Analyze key identifying features:\n"
    "- Head shape and size relative to body\n"
    "- Scale patterns and arrangement\n"
    "- Color and band patterns\n"
    "- Eye position and pupil shape\n"
    "- Specific regional species\n\n"
    "Provide detailed field guide information. Only confirm identification if you are 85%+ confident."
)

_PRECHECK_TASK = (
    f'Analyze this image and respond with ONLY "{PRECHECK_POSITIVE}" if there is a clear, identifiable '
    'snake in the image, or "not_a_snake" if it\'s not a snake or too blurry. Be strict: the image must be '
    "clear enough to reliably identify specific snake species. Respond with exactly one of these two words only."
)

JSON_ONLY_FIX = "Your response was not valid JSON. Rewrite ONLY the valid JSON object (no extra text, no fences)."


def _text_task(query: str) -> str:
    return (
        f'Retrieve accurate detailed field guide information about the snake species named "{query}". '
        "Only provide information if the name clearly refers to a real, identifiable snake species."
    )


def image_part(image_b64: str) -> dict[str, Any]:
    return {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{image_b64}"}}


def text_part(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}


class PromptBuilder:
    """Construye cuerpos de petición; el `model` lo pone el invocador."""

    def __init__(self, *, temperature: float = 0.1, max_tokens: int = 4096) -> None:
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _body(self, parts: list[dict[str, Any]], *, max_tokens: int | None = None) -> dict[str, Any]:
        return {
            "messages": [{"role": "user", "content": parts}],
            "temperature": self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }

    def identification_body(self, request: IdentificationRequest) -> dict[str, Any]:
        parts: list[dict[str, Any]] = []
        if request.kind is InputKind.IMAGE:
            parts.append(image_part(request.image_base64()))
            task = _IMAGE_TASK
        else:
            task = _text_task(request.query_text())
        parts.append(text_part(f"{_SYSTEM_INSTRUCTION}\n{task}\n\n{_OUTPUT_FORMAT}"))
        return self._body(parts)

    def precheck_body(self, request: IdentificationRequest) -> dict[str, Any]:
        return self._body([image_part(request.image_base64()), text_part(_PRECHECK_TASK)], max_tokens=16)

    @staticmethod
    def with_json_fix(body: dict[str, Any], previous_reply: str) -> dict[str, Any]:
        """Copia de `body` con un turno correctivo tras una respuesta no-JSON."""

        fixed = copy.deepcopy(body)
        fixed["messages"].append({"role": "assistant", "content": previous_reply})
        fixed["messages"].append({"role": "user", "content": JSON_ONLY_FIX})
        return fixed


def precheck_passed(reply: str) -> bool:
    return PRECHECK_POSITIVE in (reply or "").lower()
