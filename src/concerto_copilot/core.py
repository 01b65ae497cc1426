"""Core functionality for concerto-copilot - orchestrates prompting and generation."""

import logging

from . import providers
from .config import CopilotConfig
from .corpus import Corpus
from .corpus.loader import load_corpus
from .models import Documents, ModelConfig, PromptConfig
from .prompting import build_prompt

logger = logging.getLogger(__name__)


def load_default_corpus(config: CopilotConfig) -> Corpus:
    """Load the corpus files named in config.

    Unconfigured files leave that half of the corpus empty, so retrieval
    requests still work, just without examples.

    Raises:
        CorpusError: If a configured file is missing or malformed
    """
    if config.corpus.models is None and config.corpus.templates is None:
        logger.debug("No corpus configured, using an empty corpus")
    return load_corpus(config.corpus.models, config.corpus.templates)


async def generate(
    documents: Documents,
    prompt_config: PromptConfig,
    model_config: ModelConfig,
    corpus: Corpus,
) -> str:
    """Build the prompt for a request and return the provider's reply.

    Args:
        documents: Main document and context documents
        prompt_config: Request type, language and instruction
        model_config: Provider settings
        corpus: Embedded models and templates to retrieve from

    Returns:
        Generated text

    Raises:
        MissingDocumentError: If a model request lacks required documents
        UnsupportedRequestTypeError: If the request type is unknown
        EmbeddingError: If the retrieval embedding fails
        GenerationError: If generation fails
        UnknownProviderError: If the provider is not registered
    """
    messages = await build_prompt(documents, prompt_config, model_config, corpus)
    logger.debug(
        f"Sending {len(messages)} messages to {model_config.provider} "
        f"for {prompt_config.request_type.value} request"
    )
    return await providers.generate_content(model_config, messages)
