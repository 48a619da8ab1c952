"""Adaptador de inferencia (SDK OpenAI, proveedores compatibles).

Responsabilidad:
- Realizar exactamente un intercambio `chat.completions` por llamada.
- Clasificar el resultado HTTP/transporte como `AttemptOutcome`.

El cliente se construye con `max_retries=0`: los reintentos son cosa del
orquestador.
"""

from __future__ import annotations

from typing import Any

import httpx
from openai import (
    APIConnectionError,
    APIResponseValidationError,
    APIStatusError,
    AsyncOpenAI,
)

from core.config import AppSettings
from core.domain.errors import ConfigurationError
from core.domain.outcomes import (
    AttemptOutcome,
    NotFound,
    RateLimited,
    ServerError,
    Success,
    TransportError,
)
from core.interfaces.backend import BackendInvoker, ModelDescriptor


def _is_local_base_url(url: str) -> bool:
    url_l = (url or "").strip().lower()
    return url_l.startswith("http://localhost") or url_l.startswith("http://127.0.0.1") or url_l.startswith(
        "http://0.0.0.0"
    )


def resolve_api_key(settings: AppSettings) -> str:
    """API key efectiva; sin key solo se admite un proveedor local."""

    api_key = (settings.ai_api_key or "").strip()
    if api_key:
        return api_key
    if _is_local_base_url(settings.ai_base_url):
        # Proveedores locales OpenAI-compatible (Ollama, LM Studio) aceptan cualquier key.
        return "local"
    raise ConfigurationError(
        "Missing AI API key. Set SERPENT_ID_AI_API_KEY or run `serpent-id doctor setup-ai`."
    )


def build_openai_client(*, settings: AppSettings, http_client: httpx.AsyncClient | None = None) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=resolve_api_key(settings),
        base_url=settings.ai_base_url,
        timeout=settings.ai_timeout_seconds,
        max_retries=0,
        http_client=http_client,
    )


def _safe_retry_after_seconds(exc: Exception) -> float | None:
    response = getattr(exc, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    value = headers.get("retry-after")
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def _first_message_text(response: Any) -> str | None:
    choices = getattr(response, "choices", None)
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if isinstance(content, list):
        # Algunos proveedores devuelven partes en lugar de un string.
        texts = [p.get("text") for p in content if isinstance(p, dict) and isinstance(p.get("text"), str)]
        content = "".join(texts) if texts else None
    if not isinstance(content, str):
        return None
    return content


class OpenAIBackendInvoker(BackendInvoker):
    """Invocador sobre `AsyncOpenAI.chat.completions`."""

    def __init__(self, client: AsyncOpenAI) -> None:
        self._client = client

    async def invoke(self, model: ModelDescriptor, body: dict[str, Any]) -> AttemptOutcome:
        try:
            response = await self._client.chat.completions.create(model=model.id, **body)
        except APIConnectionError as exc:
            # Incluye APITimeoutError (subclase): DNS, conexión rechazada, timeout.
            return TransportError(cause=type(exc).__name__)
        except APIStatusError as exc:
            status = exc.status_code
            if status == 429:
                return RateLimited(retry_after=_safe_retry_after_seconds(exc))
            if status == 404:
                return NotFound()
            return ServerError(status_code=status)
        except APIResponseValidationError:
            return ServerError(status_code=0)
        except ValueError:
            # Cuerpo 2xx que no es JSON.
            return ServerError(status_code=0)

        content = _first_message_text(response)
        if content is None:
            return ServerError(status_code=0)
        return Success(raw_text=content)

    async def aclose(self) -> None:
        await self._client.close()
