"""Post-proceso del payload devuelto por el proveedor IA.

Por qué existe:
- El JSON del modelo es texto libre no confiable, no un contrato: los campos
  ausentes o mal tipados se rellenan con valores por defecto en vez de fallar.
- Es el único lugar donde se aplica la política de confianza, diga lo que
  diga el backend.
"""

from __future__ import annotations

import math
from typing import Any, Iterable

from core.domain.errors import MalformedResponseError
from core.domain.language import Language
from core.domain.models import (
    DangerLevel,
    IdentificationResult,
    LocalizedFields,
    Location,
    SpeciesDetail,
)

UNCLEAR_IMAGE_DESCRIPTIONS: dict[str, str] = {
    Language.ENGLISH.value: "Image quality too low or no snake detected. Please try a clearer photo.",
    Language.THAI.value: "คุณภาพภาพไม่ดีหรือไม่พบงู โปรดลองถ่ายรูปที่ชัดเจนขึ้น",
}

_LOCALIZED_LIST_FIELDS = {"first_aid"}
_DETAIL_LIST_FIELDS = {"thai_names", "other_names"}


def _as_str(value: object) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _as_str_list(value: object) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        s = _as_str(item)
        if s:
            out.append(s)
    return out


def _as_name_list(value: object) -> list[str]:
    """Lista de nombres; acepta strings u objetos con `name`/`scientific_name`."""

    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        if isinstance(item, dict):
            item = item.get("name") or item.get("scientific_name") or item.get("common_name")
        s = _as_str(item)
        if s:
            out.append(s)
    return out


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    if isinstance(value, (int, float)):
        return value != 0
    return False


def _as_confidence(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            return 0.0
    if not isinstance(value, (int, float)):
        return 0.0
    try:
        number = float(value)
    except OverflowError:
        # Entero JSON fuera de rango de float: se satura por signo.
        number = math.inf if value > 0 else -math.inf
    if math.isnan(number):
        return 0.0
    return min(100.0, max(0.0, number))


def _as_danger(value: object) -> DangerLevel:
    if isinstance(value, str):
        wanted = value.strip().lower()
        for level in DangerLevel:
            if level.value.lower() == wanted:
                return level
    return DangerLevel.SAFE


def _as_locations(value: object) -> list[Location]:
    if not isinstance(value, list):
        return []
    out: list[Location] = []
    for item in value:
        if isinstance(item, dict):
            country = _as_str(item.get("country"))
            code = _as_str(item.get("continent_code")).upper()
        else:
            country, code = _as_str(item), ""
        if country or code:
            out.append(Location(country=country, continent_code=code))
    return out


def _coerce_fields(value: dict[str, Any], names: Iterable[str], list_fields: set[str]) -> dict[str, Any]:
    return {
        name: (_as_str_list(value.get(name)) if name in list_fields else _as_str(value.get(name)))
        for name in names
    }


def _localized(value: object) -> LocalizedFields:
    if not isinstance(value, dict):
        return LocalizedFields()
    return LocalizedFields(**_coerce_fields(value, LocalizedFields.model_fields, _LOCALIZED_LIST_FIELDS))


def _detail(value: object) -> SpeciesDetail:
    if not isinstance(value, dict):
        return SpeciesDetail()
    return SpeciesDetail(**_coerce_fields(value, SpeciesDetail.model_fields, _DETAIL_LIST_FIELDS))


class ResultValidator:
    """Convierte un payload parseado en un `IdentificationResult` consistente."""

    def __init__(
        self,
        *,
        languages: Iterable[str] = Language.codes(),
        confidence_threshold: float = 85.0,
        max_locations: int = 8,
    ) -> None:
        self.languages = tuple(languages)
        self.confidence_threshold = confidence_threshold
        self.max_locations = max_locations

    def validate(self, parsed: Any) -> IdentificationResult:
        if not isinstance(parsed, dict):
            raise MalformedResponseError(f"expected a JSON object, got {type(parsed).__name__}")

        confidence = _as_confidence(parsed.get("confidence"))
        found = _as_bool(parsed.get("found")) and confidence >= self.confidence_threshold

        search_term = _as_str(parsed.get("search_term")) or _as_str(parsed.get("google_search_term"))

        return IdentificationResult(
            found=found,
            needs_clarification=_as_bool(parsed.get("needs_clarification")),
            suggestions=_as_name_list(parsed.get("suggestions")),
            related_species=_as_name_list(parsed.get("related_species")),
            scientific_name=_as_str(parsed.get("scientific_name")),
            confidence=confidence,
            is_venomous=_as_bool(parsed.get("is_venomous")),
            danger_level=_as_danger(parsed.get("danger_level")),
            locations=_as_locations(parsed.get("locations"))[: self.max_locations],
            search_term=search_term,
            data=self._localized_map(parsed.get("data")),
            details=self._details_map(parsed.get("details")),
        )

    def not_found(self, descriptions: dict[str, str] | None = None) -> IdentificationResult:
        """Resultado vacío (found=False) con descripciones opcionales por idioma."""

        descriptions = descriptions or {}
        return IdentificationResult(
            data={code: LocalizedFields(description=descriptions.get(code, "")) for code in self.languages},
            details={code: SpeciesDetail() for code in self.languages},
        )

    def _localized_map(self, value: object) -> dict[str, LocalizedFields]:
        source = value if isinstance(value, dict) else {}
        return {code: _localized(source.get(code)) for code in self.languages}

    def _details_map(self, value: object) -> dict[str, SpeciesDetail]:
        if not isinstance(value, dict):
            return {code: SpeciesDetail() for code in self.languages}

        per_language = any(isinstance(value.get(code), dict) for code in self.languages)
        if not per_language and any(name in value for name in SpeciesDetail.model_fields):
            # Ficha única (sin idioma): se replica para todos los idiomas.
            flat = _detail(value)
            return {code: flat.model_copy(deep=True) for code in self.languages}

        return {code: _detail(value.get(code)) for code in self.languages}
