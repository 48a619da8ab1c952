"""Orquestador de identificación.

Recorre una matriz de intentos (modelo × reintento) contra un pool de
backends intercambiables:
- Cada intento pasa por el rate limiter compartido.
- El resultado clasificado del intento decide la siguiente acción.
- Solo `AllBackendsUnavailable` sale hacia arriba; los fallos por intento se
  absorben y se registran.
"""

from __future__ import annotations

import asyncio
import json
import random
from typing import Any, Awaitable, Callable, TypeVar

from adapters.prompts import PromptBuilder, precheck_passed
from core.domain.errors import AllBackendsUnavailable, MalformedResponseError
from core.domain.models import IdentificationRequest, IdentificationResult, InputKind
from core.domain.outcomes import NotFound, RateLimited, ServerError, Success, TransportError
from core.interfaces.backend import BackendInvoker, ModelDescriptor
from core.logger import logger
from core.services.extraction import extract_json_text
from core.services.model_pool import ModelPool
from core.services.rate_limiter import RateLimiter
from core.services.result_validator import UNCLEAR_IMAGE_DESCRIPTIONS, ResultValidator

T = TypeVar("T")


class Orchestrator:
    """Único componente expuesto a la capa de presentación.

    El pool y el rate limiter son estado explícito de la instancia: dos
    orquestadores (p.ej. en tests) nunca comparten rotación ni presupuesto.
    """

    def __init__(
        self,
        *,
        invoker: BackendInvoker,
        pool: ModelPool,
        rate_limiter: RateLimiter,
        validator: ResultValidator | None = None,
        prompts: PromptBuilder | None = None,
        retries_per_model: int = 2,
        backoff_base: float = 1.0,
        backoff_jitter: float = 0.0,
        rate_limit_backoff: float = 1.0,
        rate_limit_backoff_max: float = 5.0,
        image_precheck: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.invoker = invoker
        self.pool = pool
        self.rate_limiter = rate_limiter
        self.validator = validator or ResultValidator()
        self.prompts = prompts or PromptBuilder()
        self.retries_per_model = retries_per_model
        self.backoff_base = backoff_base
        self.backoff_jitter = backoff_jitter
        self.rate_limit_backoff = rate_limit_backoff
        self.rate_limit_backoff_max = rate_limit_backoff_max
        self.image_precheck = image_precheck
        self._sleep = sleep

    async def __aenter__(self) -> "Orchestrator":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        close = getattr(self.invoker, "aclose", None)
        if close is not None:
            await close()

    async def identify(self, request: IdentificationRequest) -> IdentificationResult:
        """Identifica la especie de `request` o lanza `AllBackendsUnavailable`."""

        if request.kind is InputKind.IMAGE and self.image_precheck:
            reply = await self._run(self.prompts.precheck_body(request), self._accept_text)
            if not precheck_passed(reply):
                logger.info("Image pre-check rejected the photo; skipping identification")
                return self.validator.not_found(UNCLEAR_IMAGE_DESCRIPTIONS)

        result = await self._run(self.prompts.identification_body(request), self._accept_identification)
        logger.info(
            "Identified {!r} (confidence={}, found={}) via {}",
            result.scientific_name,
            result.confidence,
            result.found,
            result.model,
        )
        return result

    def _accept_text(self, raw: str, model: ModelDescriptor) -> str:
        return raw

    def _accept_identification(self, raw: str, model: ModelDescriptor) -> IdentificationResult:
        try:
            parsed: Any = json.loads(extract_json_text(raw))
        except ValueError as exc:
            # JSONDecodeError y el límite de dígitos de int() (3.11+).
            raise MalformedResponseError(f"invalid JSON: {exc}") from exc
        result = self.validator.validate(parsed)
        return result.model_copy(update={"model": model.id})

    def _backoff(self, attempt: int) -> float:
        delay = self.backoff_base * (2**attempt)
        if self.backoff_jitter > 0:
            delay += random.uniform(0.0, self.backoff_jitter)
        return delay

    async def _run(self, body: dict[str, Any], accept: Callable[[str, ModelDescriptor], T]) -> T:
        attempts = 0
        # Snapshot: avanzar el cursor durante la llamada no debe saltarse modelos.
        for model in self.pool.rotation():
            current_body = body
            for attempt in range(self.retries_per_model + 1):
                await self.rate_limiter.wait()
                attempts += 1
                outcome = await self.invoker.invoke(model, current_body)

                if isinstance(outcome, Success):
                    try:
                        return accept(outcome.raw_text, model)
                    except MalformedResponseError as exc:
                        logger.warning("Attempt {} on {} returned unusable content: {}", attempts, model.id, exc)
                        current_body = self.prompts.with_json_fix(body, outcome.raw_text)
                        continue

                logger.warning("Attempt {} on {} failed: {}", attempts, model.id, outcome.as_error())

                if isinstance(outcome, RateLimited):
                    # Un 429 no se resuelve dentro de esta llamada: sesgar la rotación y cambiar de modelo.
                    self.pool.advance()
                    wait = outcome.retry_after if outcome.retry_after is not None else self.rate_limit_backoff
                    await self._sleep(min(wait, self.rate_limit_backoff_max))
                    break

                if isinstance(outcome, NotFound):
                    self.pool.advance()
                    break

                if isinstance(outcome, (ServerError, TransportError)) and attempt < self.retries_per_model:
                    await self._sleep(self._backoff(attempt))

        logger.error("All backends exhausted after {} attempts", attempts)
        raise AllBackendsUnavailable(attempts=attempts)
