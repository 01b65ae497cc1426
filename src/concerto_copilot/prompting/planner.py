"""Prompt planning: picks the template and retrieval path per request type."""

import logging

from .. import providers
from ..corpus import Corpus
from ..corpus.namespaces import get_namespace_imports
from ..corpus.similarity import (
    fetch_relevant_grammar,
    fetch_relevant_templates,
    rank,
    render_namespace,
)
from ..errors import UnsupportedRequestTypeError
from ..models import Documents, Message, ModelConfig, PromptConfig, RequestType
from .context import generate_embedding_prompt
from .templates import (
    concerto_inline_template,
    concerto_model_template,
    fix_template,
    general_template,
    grammar_template,
    inline_template,
)

logger = logging.getLogger(__name__)

NAMESPACE_TOP_N = 4
TEMPLATE_TOP_N = 4
GRAMMAR_TOP_N = 3


def split_at_cursor(content: str, cursor_position: int | None) -> tuple[str, str]:
    """Split content into the text before and after the cursor.

    A missing cursor means the end of the content.
    """
    if cursor_position is None:
        cursor_position = len(content)
    return content[:cursor_position], content[cursor_position:]


async def build_prompt(
    documents: Documents,
    prompt_config: PromptConfig,
    model_config: ModelConfig,
    corpus: Corpus,
) -> list[Message]:
    """Build the message sequence for a request.

    Args:
        documents: Main document and context documents
        prompt_config: Request type, language and instruction
        model_config: Provider settings, used for retrieval embeddings
        corpus: Embedded models and templates to retrieve from

    Returns:
        Role-tagged messages ready for the generation provider

    Raises:
        MissingDocumentError: If a model request lacks required documents
        UnsupportedRequestTypeError: If the request type is unknown
        EmbeddingError: If the retrieval embedding cannot be generated
    """
    request_type = prompt_config.request_type
    logger.debug(f"Planning {request_type} prompt for language '{prompt_config.language}'")

    match request_type:
        case RequestType.INLINE:
            return _inline_prompt(documents, prompt_config)
        case RequestType.FIX:
            return fix_template(documents.main.content, prompt_config)
        case RequestType.GENERAL:
            return general_template(prompt_config)
        case RequestType.MODEL:
            return await _model_prompt(documents, prompt_config, model_config, corpus)
        case RequestType.GRAMMAR:
            return await _grammar_prompt(documents, prompt_config, model_config, corpus)
        case _:
            raise UnsupportedRequestTypeError(request_type)


def _inline_prompt(documents: Documents, prompt_config: PromptConfig) -> list[Message]:
    before, after = split_at_cursor(
        documents.main.content, documents.main.cursor_position
    )
    if prompt_config.is_concerto:
        return concerto_inline_template(before, after, prompt_config)
    return inline_template(before, after, prompt_config)


async def _model_prompt(
    documents: Documents,
    prompt_config: PromptConfig,
    model_config: ModelConfig,
    corpus: Corpus,
) -> list[Message]:
    # Raises before any network call if documents are missing
    query = generate_embedding_prompt(documents, RequestType.MODEL)
    provider = model_config.provider
    embedding = await providers.generate_embeddings(model_config, query)

    matches = rank(embedding, corpus.models, provider, NAMESPACE_TOP_N)
    relevant_namespaces = [render_namespace(match) for match in matches]
    imports = get_namespace_imports({match.key: match.item for match in matches})
    relevant_templates = fetch_relevant_templates(
        corpus.templates, embedding, provider, TEMPLATE_TOP_N
    )
    logger.debug(
        f"Retrieved {len(matches)} namespaces and {len(relevant_templates)} templates"
    )

    return concerto_model_template(
        documents,
        prompt_config,
        provider,
        relevant_templates,
        relevant_namespaces,
        imports,
    )


async def _grammar_prompt(
    documents: Documents,
    prompt_config: PromptConfig,
    model_config: ModelConfig,
    corpus: Corpus,
) -> list[Message]:
    query = generate_embedding_prompt(documents, RequestType.GRAMMAR)
    embedding = await providers.generate_embeddings(model_config, query)
    relevant_grammar = fetch_relevant_grammar(
        corpus.templates, embedding, model_config.provider, GRAMMAR_TOP_N
    )
    logger.debug(f"Retrieved {len(relevant_grammar)} grammar examples")
    return grammar_template(documents, prompt_config, relevant_grammar)
