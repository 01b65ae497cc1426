"""OpenAI chat completion and embedding provider.

API reference: https://platform.openai.com/docs/api-reference/chat/create
"""

from collections.abc import Sequence
from typing import Any

from ..errors import EmbeddingError, GenerationError
from ..models import Message, ModelConfig
from .base import LLMProvider, malformed


class OpenAIProvider(LLMProvider):
    """Provider speaking the OpenAI chat completions wire format.

    Other OpenAI-compatible services subclass this and override the
    endpoints, default models and embedding domain marker.
    """

    name = "openai"
    chat_url = "https://api.openai.com/v1/chat/completions"
    embeddings_url = "https://api.openai.com/v1/embeddings"
    default_model = "gpt-4o-mini"
    default_embedding_model = "text-embedding-ada-002"
    # A custom URL containing this marker already points at the embeddings
    # endpoint; anything else is treated as a base URL.
    embedding_domain = "openai"

    def _headers(self, config: ModelConfig) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.access_token}",
        }

    def build_content_request(
        self, config: ModelConfig, messages: Sequence[Message]
    ) -> dict[str, Any]:
        """Build the chat completion body; unset tuning values are left out."""
        params = config.params
        request: dict[str, Any] = {
            "model": config.llm_model or self.default_model,
            "messages": [message.to_dict() for message in messages],
        }
        optional = {
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
            "top_p": params.top_p,
            "frequency_penalty": params.frequency_penalty,
            "presence_penalty": params.presence_penalty,
        }
        request.update({k: v for k, v in optional.items() if v is not None})
        return request

    def resolve_embeddings_url(self, config: ModelConfig) -> str:
        url = config.api_url or self.embeddings_url
        if self.embedding_domain in url:
            return url
        return url.rstrip("/") + "/embeddings"

    async def generate_content(
        self, config: ModelConfig, messages: Sequence[Message]
    ) -> str:
        body = await self._post(
            config.api_url or self.chat_url,
            self.build_content_request(config, messages),
            self._headers(config),
            GenerationError,
            "generate content",
        )

        choices = body.get("choices") if isinstance(body, dict) else None
        if not choices:
            raise malformed(GenerationError, "generate content", "no choices returned")
        try:
            text = choices[0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise malformed(
                GenerationError, "generate content", f"unexpected choice shape ({e!r})"
            ) from e
        if not isinstance(text, str):
            raise malformed(GenerationError, "generate content", "choice has no text")
        return text

    async def generate_embeddings(self, config: ModelConfig, text: str) -> list[float]:
        request = {
            "input": [text],
            "model": config.embedding_model or self.default_embedding_model,
        }
        body = await self._post(
            self.resolve_embeddings_url(config),
            request,
            self._headers(config),
            EmbeddingError,
            "generate embeddings",
        )

        data = body.get("data") if isinstance(body, dict) else None
        if not data:
            raise malformed(EmbeddingError, "generate embeddings", "no embedding returned")
        try:
            embedding = [float(value) for value in data[0]["embedding"]]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise malformed(
                EmbeddingError, "generate embeddings", f"unexpected data shape ({e!r})"
            ) from e
        if not embedding:
            raise malformed(EmbeddingError, "generate embeddings", "embedding is empty")
        return embedding
