"""Pool rotatorio de modelos candidatos."""

from __future__ import annotations

from typing import Iterable

from core.domain.errors import ConfigurationError
from core.interfaces.backend import ModelDescriptor


class ModelPool:
    """Secuencia ordenada de modelos con un cursor de inicio.

    La rotación solo sesga el punto de partida de las próximas llamadas: un
    modelo que falló se prueba más tarde, nunca se excluye ni se reordena.
    """

    def __init__(self, models: Iterable[str | ModelDescriptor], *, cursor: int = 0) -> None:
        self._models: tuple[ModelDescriptor, ...] = tuple(
            m if isinstance(m, ModelDescriptor) else ModelDescriptor(id=m) for m in models
        )
        if not self._models:
            raise ConfigurationError("The model pool needs at least one model id.")
        self._cursor = cursor % len(self._models)

    def __len__(self) -> int:
        return len(self._models)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def models(self) -> tuple[ModelDescriptor, ...]:
        return self._models

    def current(self, offset: int = 0) -> ModelDescriptor:
        return self._models[(self._cursor + offset) % len(self._models)]

    def advance(self) -> None:
        self._cursor = (self._cursor + 1) % len(self._models)

    def rotation(self) -> list[ModelDescriptor]:
        """Todos los modelos empezando por el cursor actual (snapshot por llamada)."""

        return [self.current(i) for i in range(len(self._models))]
