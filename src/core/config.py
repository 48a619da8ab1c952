"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/IA) y el orquestador lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.language import Language


DEFAULT_MODELS: tuple[str, ...] = (
    "google/gemini-2.0-flash-exp:free",
    "meta-llama/llama-3.2-11b-vision-instruct:free",
    "qwen/qwen2.5-vl-72b-instruct:free",
)


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "serpent-id"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "serpent-id"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "serpent-id"
    return Path.home() / ".config" / "serpent-id"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# serpent-id user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters/orquestador.
    """

    model_config = SettingsConfigDict(
        env_prefix="SERPENT_ID_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    user_agent: str = Field(
        default="serpent-id/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para las peticiones HTTP al proveedor IA.",
    )

    ai_api_key: str | None = Field(
        default=None,
        description="API key del proveedor IA (OpenAI compatible, p.ej. OpenRouter).",
    )
    ai_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        min_length=8,
        description="Base URL compatible OpenAI.",
    )
    ai_models: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MODELS),
        min_length=1,
        description="Pool ordenado de modelos intercambiables (JSON list en env).",
    )
    ai_timeout_seconds: float = Field(
        default=45.0,
        gt=0,
        description="Timeout por intercambio con el proveedor IA (segundos).",
    )
    ai_max_tokens: int = Field(
        default=4096,
        ge=64,
        description="Límite de tokens de salida por petición.",
    )
    ai_temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=2.0,
        description="Temperatura de muestreo.",
    )

    retries_per_model: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Reintentos extra sobre el mismo modelo ante fallos transitorios.",
    )
    min_request_interval_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Separación mínima entre peticiones salientes (rate budget global).",
    )
    backoff_base_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Base del backoff exponencial ante errores de servidor/transporte.",
    )
    backoff_jitter_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Jitter aleatorio máximo sumado al backoff (0 = determinista).",
    )
    rate_limit_backoff_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Espera extra tras un 429 antes de pasar al siguiente modelo.",
    )
    rate_limit_backoff_max_seconds: float = Field(
        default=5.0,
        ge=0.0,
        description="Tope para Retry-After: un 429 nunca bloquea más que esto.",
    )

    confidence_threshold: float = Field(
        default=85.0,
        ge=0.0,
        le=100.0,
        description="Confianza mínima (0-100) para aceptar una identificación.",
    )
    max_locations: int = Field(
        default=8,
        ge=0,
        description="Máximo de ubicaciones devueltas en un resultado.",
    )
    image_precheck: bool = Field(
        default=False,
        description="Verificar primero que la imagen contiene una serpiente clara.",
    )

    default_language: Language = Field(
        default=Language.ENGLISH,
        description="Idioma por defecto para la presentación en CLI (en/th).",
    )
    log_level: str = Field(
        default="INFO",
        description="Nivel de log (loguru).",
    )

    @field_validator("ai_models")
    @classmethod
    def _strip_models(cls, value: list[str]) -> list[str]:
        models = [m.strip() for m in value if isinstance(m, str) and m.strip()]
        if not models:
            raise ValueError("ai_models must contain at least one model id")
        return models
