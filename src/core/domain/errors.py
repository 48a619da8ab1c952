"""Taxonomía de errores de identificación.

Solo `ConfigurationError` y `AllBackendsUnavailable` cruzan el límite del
orquestador; el resto describe fallos por intento y se registran en el log.
"""

from __future__ import annotations


class IdentificationError(Exception):
    """Base de todos los errores del paquete."""


class ConfigurationError(IdentificationError):
    """Configuración inválida (p.ej. falta la API key). Nunca se reintenta."""


class BackendError(IdentificationError):
    """Fallo de un único intento contra un backend."""


class TransientBackendError(BackendError):
    """Rate limit, error de servidor o de transporte."""


class PermanentBackendError(BackendError):
    """El modelo no existe en el proveedor (404)."""


class MalformedResponseError(BackendError):
    """Respuesta 2xx cuyo contenido no se puede convertir en un objeto JSON."""


class AllBackendsUnavailable(IdentificationError):
    """Se agotaron todos los modelos y reintentos.

    El mensaje es deliberadamente genérico: no distingue rate limit, caída o
    credenciales inválidas.
    """

    def __init__(self, attempts: int) -> None:
        super().__init__("The identification service is currently unavailable. Please try again later.")
        self.attempts = attempts
