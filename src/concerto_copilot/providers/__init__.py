"""Provider abstraction for LLM services.

This module provides a registry pattern for managing LLM providers,
allowing runtime selection of different generation and embedding
backends, and the two gateway calls the rest of the package uses.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .base import LLMProvider

from ..errors import UnknownProviderError
from ..models import Message, ModelConfig
from .gemini import GeminiProvider
from .mistral import MistralProvider
from .openai import OpenAIProvider

__all__ = ["ProviderRegistry", "generate_content", "generate_embeddings"]


class ProviderRegistry:
    """Registry for managing LLM providers.

    This class maintains a registry of available providers,
    allowing registration and retrieval by name.
    """

    _providers: ClassVar[dict[str, type["LLMProvider"]]] = {}
    _instances: ClassVar[dict[str, "LLMProvider"]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type["LLMProvider"]) -> None:
        """Register a provider.

        Args:
            name: Name to register the provider under
            provider_class: Provider class that implements LLMProvider
        """
        cls._providers[name] = provider_class
        cls._instances.pop(name, None)

    @classmethod
    def get(cls, name: str) -> type["LLMProvider"]:
        """Get a provider class by name.

        Args:
            name: Name of the provider to retrieve

        Returns:
            Provider class

        Raises:
            UnknownProviderError: If provider name not found
        """
        if name not in cls._providers:
            raise UnknownProviderError(name, list(cls._providers))
        return cls._providers[name]

    @classmethod
    def get_instance(cls, name: str) -> "LLMProvider":
        """Get a cached provider instance by name.

        Creates the instance on first call, returns cached instance after.

        Args:
            name: Name of the provider

        Returns:
            Cached provider instance

        Raises:
            UnknownProviderError: If provider name not found
        """
        if name not in cls._instances:
            provider_class = cls.get(name)
            cls._instances[name] = provider_class()
        return cls._instances[name]


async def generate_content(config: ModelConfig, messages: Sequence[Message]) -> str:
    """Generate text with the provider named in config.

    Raises:
        UnknownProviderError: If the provider is not registered
        GenerationError: If the provider call fails
    """
    provider = ProviderRegistry.get_instance(config.provider)
    return await provider.generate_content(config, messages)


async def generate_embeddings(config: ModelConfig, text: str) -> list[float]:
    """Embed text with the provider named in config.

    Raises:
        UnknownProviderError: If the provider is not registered
        EmbeddingError: If the provider call fails
    """
    provider = ProviderRegistry.get_instance(config.provider)
    return await provider.generate_embeddings(config, text)


# Register providers
ProviderRegistry.register("openai", OpenAIProvider)
ProviderRegistry.register("mistral", MistralProvider)
ProviderRegistry.register("gemini", GeminiProvider)
