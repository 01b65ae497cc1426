"""Configuration management for concerto-copilot.

Loads configuration from ~/.config/concerto-copilot/config.toml.
Priority chain: CLI flags > env vars > config file.
"""

import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .models import GenerationParams, ModelConfig

CONFIG_DIR = Path.home() / ".config" / "concerto-copilot"
CONFIG_PATH = CONFIG_DIR / "config.toml"

API_KEY_ENV = "CONCERTO_COPILOT_API_KEY"

DEFAULT_CONFIG = """\
# concerto-copilot configuration

[llm]
# Provider: "openai", "mistral" or "gemini"
provider = "openai"

# Chat model (provider default if empty)
model = ""

# Embedding model (provider default if empty)
embedding_model = ""

# Endpoint override (provider default if empty)
api_url = ""

[llm.params]
# Uncomment to tune generation
# temperature = 0.2
# max_tokens = 1024
# top_p = 1.0
# frequency_penalty = 0.0
# presence_penalty = 0.0

[corpus]
# JSON files written by the indexer (empty disables retrieval context)
models = ""
templates = ""

# The API key is read from an environment variable, not this file:
#   CONCERTO_COPILOT_API_KEY
"""


@dataclass(frozen=True)
class LLMConfig:
    """LLM provider configuration."""

    provider: str
    model: str | None
    embedding_model: str | None
    api_url: str | None
    params: GenerationParams


@dataclass(frozen=True)
class CorpusConfig:
    """Corpus file locations."""

    models: Path | None
    templates: Path | None


@dataclass(frozen=True)
class CopilotConfig:
    """Top-level concerto-copilot configuration."""

    llm: LLMConfig
    corpus: CorpusConfig

    def model_config(
        self,
        access_token: str | None = None,
        provider: str | None = None,
        model: str | None = None,
        require_token: bool = True,
    ) -> ModelConfig:
        """Build the per-request ModelConfig, applying CLI overrides.

        With require_token=False and no key available, access_token is the
        empty string; the result is only fit for rendering prompts that make
        no provider call.

        Raises:
            SystemExit: If no access token is given or set in the environment.
        """
        token = access_token or os.getenv(API_KEY_ENV)
        if not token and require_token:
            print(f"No API key found. Set {API_KEY_ENV}.", file=sys.stderr)
            raise SystemExit(1)

        return ModelConfig(
            provider=provider or self.llm.provider,
            access_token=token or "",
            llm_model=model or self.llm.model,
            api_url=self.llm.api_url,
            embedding_model=self.llm.embedding_model,
            params=self.llm.params,
        )


_cached_config: CopilotConfig | None = None


def generate_config() -> Path:
    """Generate default config file at ~/.config/concerto-copilot/config.toml."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(DEFAULT_CONFIG)
    return CONFIG_PATH


def _optional(value: Any) -> Any:
    return value if value not in ("", None) else None


def _optional_path(value: Any) -> Path | None:
    value = _optional(value)
    return Path(value).expanduser() if value else None


def load_config() -> CopilotConfig:
    """Load configuration from config file with env var overrides.

    On first run, generates the config file and exits so the user
    can review it before proceeding.

    Returns:
        Loaded and validated CopilotConfig.

    Raises:
        SystemExit: If config is missing (after generating) or invalid.
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    if not CONFIG_PATH.exists():
        path = generate_config()
        print(
            f"No config found. Generated {path}, review it and run again.",
            file=sys.stderr,
        )
        raise SystemExit(1)

    with open(CONFIG_PATH, "rb") as f:
        data = tomllib.load(f)

    llm = data.get("llm", {})
    corpus = data.get("corpus", {})

    # Validate required fields
    missing = []
    if "provider" not in llm:
        missing.append("llm.provider")

    if missing:
        print(
            f"Missing required config values: {', '.join(missing)}",
            file=sys.stderr,
        )
        print(f"Edit {CONFIG_PATH} or delete it to regenerate.", file=sys.stderr)
        raise SystemExit(1)

    try:
        params = GenerationParams(**llm.get("params", {}))
    except (TypeError, ValueError) as e:
        print(f"Invalid [llm.params] in {CONFIG_PATH}: {e}", file=sys.stderr)
        raise SystemExit(1) from None

    # Env vars override config file values
    _cached_config = CopilotConfig(
        llm=LLMConfig(
            provider=os.getenv("CONCERTO_COPILOT_PROVIDER", llm["provider"]),
            model=_optional(os.getenv("CONCERTO_COPILOT_MODEL", llm.get("model"))),
            embedding_model=_optional(
                os.getenv(
                    "CONCERTO_COPILOT_EMBEDDING_MODEL", llm.get("embedding_model")
                )
            ),
            api_url=_optional(os.getenv("CONCERTO_COPILOT_API_URL", llm.get("api_url"))),
            params=params,
        ),
        corpus=CorpusConfig(
            models=_optional_path(corpus.get("models")),
            templates=_optional_path(corpus.get("templates")),
        ),
    )

    return _cached_config
