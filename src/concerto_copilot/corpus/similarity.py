"""Cosine similarity ranking over the embedded corpus."""

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

import numpy as np

from .models import Embedding, ModelEmbeddings, TemplateEmbeddings

logger = logging.getLogger(__name__)

_IMPORT_LINE = re.compile(r"^[ \t]*import .*(?:\r?\n|$)", re.MULTILINE)


class Embedded(Protocol):
    def embedding_for(self, provider: str) -> Embedding | None: ...


T = TypeVar("T", bound=Embedded)


@dataclass(frozen=True)
class Match(Generic[T]):
    """A ranked corpus entry."""

    key: str
    item: T
    similarity: float


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """Calculate cosine similarity between two vectors.

    Args:
        vec1: First vector
        vec2: Second vector of the same length

    Returns:
        Similarity in [-1.0, 1.0]; 0.0 if either vector has zero norm

    Raises:
        ValueError: If the vectors differ in length
    """
    a = np.asarray(vec1, dtype=np.float64)
    b = np.asarray(vec2, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Vector shapes differ: {a.shape} vs {b.shape}")

    denominator = np.linalg.norm(a) * np.linalg.norm(b)
    if denominator == 0.0:
        return 0.0
    return float(np.dot(a, b) / denominator)


def rank(
    query: Sequence[float],
    items: Mapping[str, T],
    provider: str,
    top_n: int,
) -> list[Match[T]]:
    """Rank items by similarity of their provider embedding to query.

    Items with no embedding for provider, or whose embedding differs in
    length from query, are skipped, not scored. Equal scores keep the
    mapping's iteration order.

    Args:
        query: Query embedding from the same provider
        items: Corpus entries keyed by identifier
        provider: Provider whose embeddings are compared
        top_n: Maximum number of matches to return

    Returns:
        Up to top_n matches, highest similarity first
    """
    scored = []
    for key, item in items.items():
        embedding = item.embedding_for(provider)
        if embedding is None:
            continue
        if len(embedding) != len(query):
            logger.warning(
                f"Skipping '{key}': {provider} embedding has {len(embedding)} "
                f"dimensions, query has {len(query)}"
            )
            continue
        scored.append(Match(key, item, cosine_similarity(query, embedding)))

    # sorted() is stable, so ties stay in insertion order
    ranked = sorted(scored, key=lambda match: match.similarity, reverse=True)[
        : max(top_n, 0)
    ]
    logger.debug(
        f"Ranked {len(scored)}/{len(items)} entries for provider '{provider}', "
        f"kept {len(ranked)}"
    )
    return ranked


def strip_imports(content: str) -> str:
    """Remove every `import ...` line from model source."""
    return _IMPORT_LINE.sub("", content)


def render_namespace(match: Match[ModelEmbeddings]) -> str:
    return f"{match.key}\n"


def fetch_relevant_namespaces(
    models: Mapping[str, ModelEmbeddings],
    query: Sequence[float],
    provider: str,
    top_n: int = 4,
) -> list[str]:
    """Return the keys of the most relevant model files, one per line."""
    return [render_namespace(match) for match in rank(query, models, provider, top_n)]


def fetch_relevant_templates(
    templates: Mapping[str, TemplateEmbeddings],
    query: Sequence[float],
    provider: str,
    top_n: int = 4,
) -> list[str]:
    """Render the most relevant templates with their grammar and model."""
    rendered = []
    for match in rank(query, templates, provider, top_n):
        template = match.item
        model_content = strip_imports(
            template.model if template.model is not None else template.grammar
        )
        rendered.append(
            f"Template: {match.key}\n"
            f"Template grammar: {template.grammar}\n"
            f"Corresponding model: {model_content}\n"
        )
    return rendered


def fetch_relevant_grammar(
    templates: Mapping[str, TemplateEmbeddings],
    query: Sequence[float],
    provider: str,
    top_n: int = 3,
) -> list[str]:
    """Render the most relevant sample/grammar pairs."""
    return [
        f"Template sample: {match.item.sample}\n"
        f" and corresponding grammar: {match.item.grammar}\n"
        for match in rank(query, templates, provider, top_n)
    ]
