"""Logging unificado (loguru).

Por qué loguru:
- Un único `logger` configurado para Core, adaptadores y CLI.
- La salida va a stderr para no mezclarse con resultados JSON en stdout.

Uso:
    from core.logger import logger

    logger.info("mensaje")
    logger.warning("intento fallido: {}", err)
"""

from __future__ import annotations

import logging
import os
import sys

from loguru import logger

LOG_LEVEL = os.getenv("SERPENT_ID_LOG_LEVEL", "INFO").upper()

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{message}</cyan>"
)


def configure_logging(level: str = LOG_LEVEL) -> None:
    """(Re)configura el sink de consola con el nivel indicado."""

    logger.remove()
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level.upper(),
        colorize=None,
        backtrace=False,
        diagnose=False,
    )


configure_logging()

# Librerías ruidosas (stdlib logging): solo avisos.
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)

__all__ = ["logger", "configure_logging"]
