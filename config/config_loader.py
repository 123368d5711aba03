"""Load settings.yaml into typed dataclasses. Validates API keys at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

# Providers with this sdk never leave the process and need no API key.
MOCK_SDK = "mock"


@dataclass
class GenerationParams:
    temperature: float = 0.7
    max_tokens: int = 2000
    top_p: float | None = 0.95
    frequency_penalty: float | None = None
    presence_penalty: float | None = None


@dataclass
class ModelConfig:
    name: str
    sdk: str
    model: str
    api_key_env: str
    timeout_sec: int
    display_name: str = ""
    fallback_model: str | None = None
    base_url: str | None = None
    context_chars: int = 12000
    fallback_context_chars: int = 12000
    history_window: int = 10
    fallback_history_window: int = 8
    params: GenerationParams = field(default_factory=GenerationParams)
    fallback_params: GenerationParams = field(
        default_factory=lambda: GenerationParams(temperature=0.6, max_tokens=1500, top_p=0.9)
    )
    headers: dict[str, str] = field(default_factory=dict)
    delay_sec: float = 0.0  # mock sdk only

    def label(self) -> str:
        return self.display_name or self.name


@dataclass
class PromptsConfig:
    system: str
    context: str
    fallback_context: str
    synthesis_system: str
    synthesis: str
    summary: str = ""


@dataclass
class DefaultsConfig:
    synthesizer: str
    fallback_provider: str
    document_timeout_sec: float = 120.0
    chat_timeout_sec: float = 60.0
    synthesis_params: GenerationParams = field(
        default_factory=lambda: GenerationParams(temperature=0.3, max_tokens=3000, top_p=0.9)
    )


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    models: dict[str, ModelConfig]
    prompts: PromptsConfig
    available_providers: set[str] = field(default_factory=set)


def _load_params(raw: dict | None, base: GenerationParams) -> GenerationParams:
    """Overlay a raw params mapping onto base values."""
    if not raw:
        return base
    return GenerationParams(
        temperature=float(raw.get("temperature", base.temperature)),
        max_tokens=int(raw.get("max_tokens", base.max_tokens)),
        top_p=raw.get("top_p", base.top_p),
        frequency_penalty=raw.get("frequency_penalty", base.frequency_penalty),
        presence_penalty=raw.get("presence_penalty", base.presence_penalty),
    )


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing.
    Logs missing API keys but does not raise. The orchestrator raises
    ConfigurationError later if no provider is left.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    defaults_raw = raw["defaults"]
    defaults = DefaultsConfig(
        synthesizer=str(defaults_raw["synthesizer"]),
        fallback_provider=str(defaults_raw["fallback_provider"]),
        document_timeout_sec=float(defaults_raw.get("document_timeout_sec", 120)),
        chat_timeout_sec=float(defaults_raw.get("chat_timeout_sec", 60)),
        synthesis_params=_load_params(
            defaults_raw.get("synthesis_params"),
            GenerationParams(temperature=0.3, max_tokens=3000, top_p=0.9),
        ),
    )

    prompts_raw = raw["prompts"]
    prompts = PromptsConfig(
        system=prompts_raw["system"],
        context=prompts_raw["context"],
        fallback_context=prompts_raw["fallback_context"],
        synthesis_system=prompts_raw["synthesis_system"],
        synthesis=prompts_raw["synthesis"],
        summary=prompts_raw.get("summary", ""),
    )

    models: dict[str, ModelConfig] = {}
    available_providers: set[str] = set()

    for provider_name, model_raw in raw["models"].items():
        model_cfg = ModelConfig(
            name=provider_name,
            sdk=model_raw["sdk"],
            model=model_raw["model"],
            api_key_env=model_raw.get("api_key_env", ""),
            timeout_sec=int(model_raw["timeout_sec"]),
            display_name=model_raw.get("display_name", ""),
            fallback_model=model_raw.get("fallback_model"),
            base_url=model_raw.get("base_url"),
            context_chars=int(model_raw.get("context_chars", 12000)),
            fallback_context_chars=int(model_raw.get("fallback_context_chars", 12000)),
            history_window=int(model_raw.get("history_window", 10)),
            fallback_history_window=int(model_raw.get("fallback_history_window", 8)),
            params=_load_params(model_raw.get("params"), GenerationParams()),
            fallback_params=_load_params(
                model_raw.get("fallback_params"),
                GenerationParams(temperature=0.6, max_tokens=1500, top_p=0.9),
            ),
            headers={k: str(v) for k, v in model_raw.get("headers", {}).items()},
            delay_sec=float(model_raw.get("delay_sec", 0.0)),
        )
        models[provider_name] = model_cfg

        if model_cfg.sdk == MOCK_SDK:
            available_providers.add(provider_name)
            logger.info("Provider available (mock): %s", provider_name)
            continue

        api_key = os.environ.get(model_cfg.api_key_env, "").strip() if model_cfg.api_key_env else ""
        if api_key:
            available_providers.add(provider_name)
            logger.info("Provider available: %s", provider_name)
        else:
            logger.info(
                "Provider skipped (no API key): %s, set %s in .env",
                provider_name,
                model_cfg.api_key_env,
            )

    return AppConfig(
        defaults=defaults,
        models=models,
        prompts=prompts,
        available_providers=available_providers,
    )
