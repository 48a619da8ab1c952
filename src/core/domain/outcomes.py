"""Resultado clasificado de un intento contra un backend.

Por qué una variante etiquetada (y no excepciones):
- El orquestador decide la siguiente acción según el tipo (`isinstance`).
- Cada clasificación se puede testear sin red.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from core.domain.errors import BackendError, PermanentBackendError, TransientBackendError


@dataclass(frozen=True)
class Success:
    raw_text: str

    def as_error(self) -> BackendError | None:
        return None


@dataclass(frozen=True)
class RateLimited:
    retry_after: float | None = None

    def as_error(self) -> BackendError:
        return TransientBackendError("rate limited (429)")


@dataclass(frozen=True)
class NotFound:
    def as_error(self) -> BackendError:
        return PermanentBackendError("model not found (404)")


@dataclass(frozen=True)
class ServerError:
    status_code: int

    def as_error(self) -> BackendError:
        if self.status_code == 0:
            return TransientBackendError("malformed success response")
        return TransientBackendError(f"server error ({self.status_code})")


@dataclass(frozen=True)
class TransportError:
    cause: str

    def as_error(self) -> BackendError:
        return TransientBackendError(f"transport error: {self.cause}")


AttemptOutcome = Union[Success, RateLimited, NotFound, ServerError, TransportError]
