"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers del cliente HTTP que usa el SDK OpenAI.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - El timeout es el deadline implícito de cada intercambio: al vencer, el
      intento se clasifica como error de transporte.
    - Centraliza headers para que todas las llamadas se comporten igual.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.ai_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
