"""Google Gemini provider.

API reference: https://ai.google.dev/api/generate-content
"""

from collections.abc import Sequence
from typing import Any

from ..errors import EmbeddingError, GenerationError
from ..models import Message, ModelConfig
from .base import LLMProvider, malformed

# Gemini calls the assistant role "model" and has no system role in contents
_ROLE_MAP = {"assistant": "model", "model": "model"}


class GeminiProvider(LLMProvider):
    """Gemini generateContent and embedContent provider."""

    name = "gemini"
    base_url = "https://generativelanguage.googleapis.com/v1beta"
    default_model = "gemini-1.5-flash"
    default_embedding_model = "text-embedding-004"

    def _headers(self, config: ModelConfig) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": config.access_token,
        }

    def _model_url(self, config: ModelConfig, model: str, method: str) -> str:
        base = (config.api_url or self.base_url).rstrip("/")
        return f"{base}/models/{model}:{method}"

    def build_content_request(
        self, config: ModelConfig, messages: Sequence[Message]
    ) -> dict[str, Any]:
        """Translate chat messages into a generateContent body."""
        system_parts = []
        contents = []
        for message in messages:
            if message.role == "system":
                system_parts.append({"text": message.content})
            else:
                contents.append(
                    {
                        "role": _ROLE_MAP.get(message.role, "user"),
                        "parts": [{"text": message.content}],
                    }
                )

        request: dict[str, Any] = {"contents": contents}
        if system_parts:
            request["systemInstruction"] = {"parts": system_parts}

        params = config.params
        generation_config = {
            "temperature": params.temperature,
            "maxOutputTokens": params.max_tokens,
            "topP": params.top_p,
            "frequencyPenalty": params.frequency_penalty,
            "presencePenalty": params.presence_penalty,
        }
        generation_config = {k: v for k, v in generation_config.items() if v is not None}
        if generation_config:
            request["generationConfig"] = generation_config
        return request

    async def generate_content(
        self, config: ModelConfig, messages: Sequence[Message]
    ) -> str:
        model = config.llm_model or self.default_model
        body = await self._post(
            self._model_url(config, model, "generateContent"),
            self.build_content_request(config, messages),
            self._headers(config),
            GenerationError,
            "generate content",
        )

        candidates = body.get("candidates") if isinstance(body, dict) else None
        if not candidates:
            raise malformed(GenerationError, "generate content", "no candidates returned")
        try:
            parts = candidates[0]["content"]["parts"]
            text = "".join(part["text"] for part in parts if "text" in part)
        except (KeyError, IndexError, TypeError) as e:
            raise malformed(
                GenerationError, "generate content", f"unexpected candidate shape ({e!r})"
            ) from e
        if not text:
            raise malformed(GenerationError, "generate content", "candidate has no text")
        return text

    async def generate_embeddings(self, config: ModelConfig, text: str) -> list[float]:
        model = config.embedding_model or self.default_embedding_model
        request = {
            "model": f"models/{model}",
            "content": {"parts": [{"text": text}]},
        }
        body = await self._post(
            self._model_url(config, model, "embedContent"),
            request,
            self._headers(config),
            EmbeddingError,
            "generate embeddings",
        )

        try:
            embedding = [float(value) for value in body["embedding"]["values"]]
        except (KeyError, TypeError, ValueError) as e:
            raise malformed(
                EmbeddingError, "generate embeddings", f"unexpected embedding shape ({e!r})"
            ) from e
        if not embedding:
            raise malformed(EmbeddingError, "generate embeddings", "embedding is empty")
        return embedding
