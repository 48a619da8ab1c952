"""Separación mínima entre peticiones salientes.

Una única instancia por orquestador: el presupuesto de peticiones del
proveedor es global, no por modelo.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable


class RateLimiter:
    """Garantiza `min_interval` segundos entre dos salidas consecutivas.

    El hueco se reserva antes de dormir: quien llega después ve el slot ya
    ocupado y se encola detrás, y cancelar la espera no deja estado a medias.
    """

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_slot: float | None = None

    @property
    def last_slot(self) -> float | None:
        return self._last_slot

    async def wait(self) -> None:
        now = self._clock()
        delay = 0.0
        if self._last_slot is not None:
            delay = max(0.0, self._last_slot + self.min_interval - now)
        self._last_slot = now + delay
        if delay > 0:
            await self._sleep(delay)
