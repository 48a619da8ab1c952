"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los nombres de campo son snake_case, igual que el JSON que devuelve el
  proveedor IA, así `model_dump(mode="json")` reproduce el formato de cable.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
- Las invariantes de negocio (umbral de confianza, máximo de ubicaciones) se
  aplican en `core.services.result_validator`, no aquí.
"""

from __future__ import annotations

import base64
from enum import Enum

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class InputKind(str, Enum):
    """Tipo de entrada de una identificación."""

    IMAGE = "image"
    TEXT = "text"


class DangerLevel(str, Enum):
    SAFE = "Safe"
    MODERATE = "Moderate"
    HIGH = "High"
    CRITICAL = "Critical"


class IdentificationRequest(BaseModel):
    """Petición inmutable de identificación (una por llamada).

    Por qué existe:
    - Normaliza los tres formatos de imagen aceptados (bytes, base64, data URL)
      en un único punto.
    - Falla pronto ante entradas vacías, antes de gastar rate budget.
    """

    model_config = ConfigDict(frozen=True)

    payload: bytes | str = Field(
        ...,
        description="Bytes/base64/data URL de la imagen, o texto libre de búsqueda.",
    )
    kind: InputKind = Field(
        ...,
        description="'image' o 'text'.",
    )

    @model_validator(mode="after")
    def _check_payload(self) -> "IdentificationRequest":
        if self.kind is InputKind.TEXT:
            if not isinstance(self.payload, str) or not self.payload.strip():
                raise ValueError("text requests need a non-empty query string")
        elif not self.payload:
            raise ValueError("image requests need image data")
        return self

    def image_base64(self) -> str:
        """Base64 puro de la imagen (sin prefijo `data:...;base64,`)."""

        if self.kind is not InputKind.IMAGE:
            raise ValueError("not an image request")
        if isinstance(self.payload, bytes):
            return base64.b64encode(self.payload).decode("ascii")
        data = self.payload.strip()
        if "base64," in data:
            data = data.split("base64,", 1)[1]
        return data

    def query_text(self) -> str:
        if self.kind is not InputKind.TEXT:
            raise ValueError("not a text request")
        return str(self.payload).strip()


class LocalizedFields(BaseModel):
    """Textos de presentación en un idioma."""

    name: str = Field(default="", description="Nombre común.")
    description: str = Field(default="", description="Descripción en lenguaje sencillo.")
    first_aid: list[str] = Field(default_factory=list, description="Pasos de primeros auxilios.")
    toxicity_details: str = Field(default="", description="Detalle de toxicidad.")
    fun_fact: str = Field(default="", description="Dato curioso.")
    habitat_text: str = Field(default="", description="Hábitat en lenguaje sencillo.")


class SpeciesDetail(BaseModel):
    """Ficha de guía de campo en un idioma."""

    scientific_name: str = ""
    family: str = ""
    thai_names: list[str] = Field(default_factory=list)
    other_names: list[str] = Field(default_factory=list)
    range: str = ""
    habitat: str = ""
    active_time: str = Field(default="", description="Diurnal, Nocturnal o Crepuscular.")
    diet: str = ""
    venom_toxicity: str = ""
    danger_to_humans: str = ""
    prevention: str = ""
    behavior: str = ""


class Location(BaseModel):
    country: str = Field(default="", description="País o región.")
    continent_code: str = Field(default="", description="AS, AF, NA, SA, EU, OC.")


class IdentificationResult(BaseModel):
    """Resultado raíz de una identificación.

    Por qué un único modelo:
    - La capa de presentación siempre recibe la misma forma, haya o no
      identificación (`found=False` con campos vacíos en lugar de claves ausentes).
    """

    found: bool = Field(default=False, description="True si se identificó la especie.")
    needs_clarification: bool = Field(
        default=False,
        description="El modelo pide más información (extensión opcional).",
    )
    suggestions: list[str] = Field(
        default_factory=list,
        description="Especies candidatas cuando no hay identificación segura.",
    )
    related_species: list[str] = Field(
        default_factory=list,
        description="Especies parecidas con las que se confunde.",
    )
    scientific_name: str = ""
    confidence: float = Field(default=0.0, ge=0.0, le=100.0, description="Confianza 0-100.")
    is_venomous: bool = False
    danger_level: DangerLevel = DangerLevel.SAFE
    locations: list[Location] = Field(default_factory=list)
    search_term: str = Field(default="", description="Término sugerido para búsquedas web.")
    data: dict[str, LocalizedFields] = Field(default_factory=dict)
    details: dict[str, SpeciesDetail] = Field(default_factory=dict)
    model: str | None = Field(
        default=None,
        description="Identificador del modelo IA que produjo el resultado (si aplica).",
    )
