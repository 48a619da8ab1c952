"""End-to-end tests: settings -> httpx mock transport -> OpenAI SDK -> orchestrator."""

import json

import httpx
import pytest

from core.config import AppSettings
from core.domain.errors import AllBackendsUnavailable, ConfigurationError
from core.domain.models import IdentificationRequest, InputKind
from core.services import identification_pipeline as pipeline
from core.services.identification_pipeline import build_orchestrator, identify_species

from conftest import make_payload


def settings(**overrides) -> AppSettings:
    values = {
        "ai_api_key": "sk-test",
        "ai_base_url": "https://llm.example.test/v1",
        "ai_models": ["vision-a", "vision-b"],
        "min_request_interval_seconds": 0.0,
        "backoff_base_seconds": 0.0,
        "rate_limit_backoff_seconds": 0.0,
    }
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


def completion(content: str) -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "m",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
    }


class TestBuildOrchestrator:
    def test_missing_key_fails_before_any_request(self):
        with pytest.raises(ConfigurationError):
            build_orchestrator(settings(ai_api_key=None))

    @pytest.mark.asyncio
    async def test_identify_species_requires_key(self):
        with pytest.raises(ConfigurationError):
            await identify_species("king cobra", "text", settings=settings(ai_api_key=None))

    def test_settings_are_applied(self):
        orchestrator = build_orchestrator(settings(retries_per_model=1, image_precheck=True))

        assert [m.id for m in orchestrator.pool.models] == ["vision-a", "vision-b"]
        assert orchestrator.retries_per_model == 1
        assert orchestrator.image_precheck is True
        assert orchestrator.validator.confidence_threshold == 85

    def test_invalid_pool_opens_no_http_client(self, monkeypatch):
        opened = []

        def broken_pool(models):
            raise ConfigurationError("empty pool")

        monkeypatch.setattr(pipeline, "ModelPool", broken_pool)
        monkeypatch.setattr(pipeline, "build_async_client", lambda *a, **kw: opened.append(a))

        with pytest.raises(ConfigurationError):
            build_orchestrator(settings())

        assert opened == []


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_rate_limited_model_then_success(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            seen.append(body["model"])
            assert request.headers["authorization"] == "Bearer sk-test"
            if body["model"] == "vision-a":
                return httpx.Response(429, json={"error": {"message": "rate limited"}})
            content = "```json\n" + json.dumps(make_payload(), ensure_ascii=False) + "\n```"
            return httpx.Response(200, json=completion(content))

        orchestrator = build_orchestrator(settings(), transport=httpx.MockTransport(handler))
        async with orchestrator:
            result = await orchestrator.identify(IdentificationRequest(payload="king cobra", kind=InputKind.TEXT))

        assert seen == ["vision-a", "vision-b"]
        assert result.found is True
        assert result.model == "vision-b"
        assert result.data["th"].name == "งูจงอาง"
        assert orchestrator.pool.cursor == 1

    @pytest.mark.asyncio
    async def test_outage_surfaces_single_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, json={"error": {"message": "bad gateway"}})

        orchestrator = build_orchestrator(settings(retries_per_model=1), transport=httpx.MockTransport(handler))
        async with orchestrator:
            with pytest.raises(AllBackendsUnavailable) as excinfo:
                await orchestrator.identify(IdentificationRequest(payload="king cobra", kind=InputKind.TEXT))

        assert excinfo.value.attempts == 4
