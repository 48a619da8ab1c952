"""Contrato de backends de inferencia.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que el SDK OpenAI, un cliente HTTP crudo o un fake de tests sean
  intercambiables sin acoplar el orquestador a implementaciones concretas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from core.domain.outcomes import AttemptOutcome


@dataclass(frozen=True)
class ModelDescriptor:
    """Identificador opaco de un modelo/backend."""

    id: str


@runtime_checkable
class BackendInvoker(Protocol):
    """Contrato mínimo para un backend.

    Reglas de diseño:
    - `invoke` es asíncrono porque hace exactamente un intercambio de red.
    - Nunca lanza por fallos del proveedor: los clasifica en un `AttemptOutcome`.
    - Nunca reintenta; la política de reintentos es del orquestador.
    """

    async def invoke(self, model: ModelDescriptor, body: dict[str, Any]) -> AttemptOutcome:
        """Envía `body` al `model` y devuelve el resultado clasificado."""

        ...
