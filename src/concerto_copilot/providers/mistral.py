"""Mistral provider; Mistral's API is OpenAI-compatible."""

from .openai import OpenAIProvider


class MistralProvider(OpenAIProvider):
    """Mistral chat completion and embedding provider."""

    name = "mistral"
    chat_url = "https://api.mistral.ai/v1/chat/completions"
    embeddings_url = "https://api.mistral.ai/v1/embeddings"
    default_model = "mistral-large-latest"
    default_embedding_model = "mistral-embed"
    embedding_domain = "mistral"
