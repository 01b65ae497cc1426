"""Abstract base class for LLM providers.

This module defines the interface that all providers must implement,
ensuring consistent behavior across different LLM backends.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import httpx

from ..errors import FailureKind, ProviderError
from ..models import Message, ModelConfig

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses shape requests and parse responses for one provider's wire
    format. Posting, status checks and the mapping of failures onto
    GenerationError/EmbeddingError live here so every provider reports
    failures the same way.

    Args:
        client: Optional shared httpx client. When omitted, each call opens
            a short-lived client with no timeout.
    """

    name: str = "base"

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    @abstractmethod
    async def generate_content(
        self, config: ModelConfig, messages: Sequence[Message]
    ) -> str:
        """Generate text for a message sequence.

        Args:
            config: Provider settings and tuning parameters
            messages: Role-tagged messages

        Returns:
            The generated text

        Raises:
            GenerationError: If the call fails or the response is malformed
        """
        pass

    @abstractmethod
    async def generate_embeddings(self, config: ModelConfig, text: str) -> list[float]:
        """Embed a single text.

        Args:
            config: Provider settings
            text: Text to embed

        Returns:
            The embedding vector

        Raises:
            EmbeddingError: If the call fails or the response is malformed
        """
        pass

    async def _post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str],
        error_class: type[ProviderError],
        action: str,
    ) -> Any:
        """POST JSON and return the decoded body of a 200 response.

        Raises:
            error_class: SERVER kind for non-200 status, TRANSPORT kind if
                the request never got a response, PROCESSING kind if the
                body is not JSON
        """
        logger.debug(f"POST {url} ({self.name} {action})")
        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=None) as client:
                    response = await client.post(url, json=payload, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"Error {action}: request to {url} failed: {e!r}")
            raise error_class(
                "Failed to send request to the server.",
                kind=FailureKind.TRANSPORT,
                original_error=e,
            ) from e

        if response.status_code != 200:
            provider_message = _error_message(response)
            logger.error(
                f"Error {action}: {response.status_code} {response.reason_phrase}"
            )
            logger.debug(f"Response data: {response.text}")
            raise error_class(
                f"Failed to {action} due to an error "
                f"({response.status_code} {response.reason_phrase}).",
                status_code=response.status_code,
                kind=FailureKind.SERVER,
                provider_message=provider_message,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Error {action}: response body is not JSON")
            raise error_class(
                "An error occurred while processing the response.",
                status_code=response.status_code,
                kind=FailureKind.PROCESSING,
                original_error=e,
            ) from e


def _error_message(response: httpx.Response) -> str | None:
    """Pull the provider's own error message out of an error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("message")
        if isinstance(error, str):
            return error
        if isinstance(body.get("message"), str):
            return body["message"]
    return None


def malformed(
    error_class: type[ProviderError], action: str, detail: str, status_code: int = 200
) -> ProviderError:
    """Build the error for a 200 response missing expected fields."""
    logger.error(f"Error {action}: {detail}")
    return error_class(
        f"Failed to {action}. Invalid response from server: {detail}.",
        status_code=status_code,
        kind=FailureKind.PROCESSING,
    )

