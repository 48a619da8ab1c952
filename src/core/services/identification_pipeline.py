"""Ensamblado del pipeline de identificación.

Este módulo conecta settings → cliente HTTP → invocador → orquestador, de
modo que la CLI (u otros entry-points: APIs, batch jobs, tests) solo tengan
que pedir un `Orchestrator` o llamar a `identify_species`.
"""

from __future__ import annotations

import httpx

from adapters.http_client import build_async_client
from adapters.openai_backend import OpenAIBackendInvoker, build_openai_client, resolve_api_key
from adapters.prompts import PromptBuilder
from core.config import AppSettings
from core.domain.language import Language
from core.domain.models import IdentificationRequest, IdentificationResult, InputKind
from core.services.model_pool import ModelPool
from core.services.orchestrator import Orchestrator
from core.services.rate_limiter import RateLimiter
from core.services.result_validator import ResultValidator


def build_orchestrator(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Orchestrator:
    """Crea un orquestador listo para usar.

    Lanza `ConfigurationError` (sin tocar la red) si falta la API key.
    """

    settings = settings or AppSettings()
    resolve_api_key(settings)

    # Todo lo que puede fallar va antes de abrir el cliente HTTP.
    pool = ModelPool(settings.ai_models)
    rate_limiter = RateLimiter(settings.min_request_interval_seconds)

    http_client = build_async_client(settings, transport=transport)
    invoker = OpenAIBackendInvoker(build_openai_client(settings=settings, http_client=http_client))

    return Orchestrator(
        invoker=invoker,
        pool=pool,
        rate_limiter=rate_limiter,
        validator=ResultValidator(
            languages=Language.codes(),
            confidence_threshold=settings.confidence_threshold,
            max_locations=settings.max_locations,
        ),
        prompts=PromptBuilder(temperature=settings.ai_temperature, max_tokens=settings.ai_max_tokens),
        retries_per_model=settings.retries_per_model,
        backoff_base=settings.backoff_base_seconds,
        backoff_jitter=settings.backoff_jitter_seconds,
        rate_limit_backoff=settings.rate_limit_backoff_seconds,
        rate_limit_backoff_max=settings.rate_limit_backoff_max_seconds,
        image_precheck=settings.image_precheck,
    )


async def identify_species(
    payload: bytes | str,
    kind: InputKind | str,
    *,
    settings: AppSettings | None = None,
) -> IdentificationResult:
    """Atajo de una sola llamada: construye, identifica y cierra."""

    request = IdentificationRequest(payload=payload, kind=InputKind(kind))
    async with build_orchestrator(settings) as orchestrator:
        return await orchestrator.identify(request)
