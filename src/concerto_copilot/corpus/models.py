"""Data models for the embedded corpus."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

Embedding: TypeAlias = list[float]


def normalize_embedding(raw: Any) -> Embedding | None:
    """Coerce a stored provider payload into a flat vector.

    Indexers have written vectors in several shapes over time: a bare
    list, {"embeddings": [...]}, {"embeddings": {"embedding": [...]}},
    {"embedding": [...]} and {"values": [...]}. All collapse to a list
    of floats here so lookups at query time never need to know the shape.

    Args:
        raw: Payload stored under a provider key

    Returns:
        The vector, or None if the payload holds no usable vector
    """
    if isinstance(raw, Mapping):
        for key in ("embeddings", "embedding", "values"):
            if key in raw:
                return normalize_embedding(raw[key])
        return None
    if isinstance(raw, (list, tuple)):
        if not raw:
            return None
        try:
            return [float(value) for value in raw]
        except (TypeError, ValueError):
            return None
    return None


def _lookup(embeddings: Mapping[str, Embedding], provider: str) -> Embedding | None:
    vector = embeddings.get(provider)
    return vector if vector else None


@dataclass(frozen=True)
class ModelEmbeddings:
    """A Concerto model file with per-provider embeddings.

    Attributes:
        file_name: Model file name (e.g. "vehicle.cto")
        file_content: Raw model source text
        embeddings: Provider name to embedding vector
    """

    file_name: str
    file_content: str
    embeddings: Mapping[str, Embedding] = field(default_factory=dict)

    def embedding_for(self, provider: str) -> Embedding | None:
        return _lookup(self.embeddings, provider)


@dataclass(frozen=True)
class TemplateEmbeddings:
    """A template's grammar, sample and optional model text.

    Ranking uses the grammar's embedding for the requested provider;
    a template without one is left out entirely.

    Attributes:
        name: Template identifier
        grammar: Template grammar text (grammar.tem.md)
        sample: Sample text rendered from the grammar
        model: The template's Concerto model source, if stored
        grammar_embeddings: Provider name to grammar embedding vector
    """

    name: str
    grammar: str
    sample: str = ""
    model: str | None = None
    grammar_embeddings: Mapping[str, Embedding] = field(default_factory=dict)

    def embedding_for(self, provider: str) -> Embedding | None:
        return _lookup(self.grammar_embeddings, provider)
