"""Read-only corpus of embedded models and templates."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .models import Embedding, ModelEmbeddings, TemplateEmbeddings

__all__ = ["Corpus", "Embedding", "ModelEmbeddings", "TemplateEmbeddings"]


@dataclass(frozen=True)
class Corpus:
    """Models and templates available for retrieval.

    Both mappings are wrapped read-only on construction and keep their
    insertion order, which is also the tie-break order when ranking.
    """

    models: Mapping[str, ModelEmbeddings] = field(default_factory=dict)
    templates: Mapping[str, TemplateEmbeddings] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "models", MappingProxyType(dict(self.models)))
        object.__setattr__(self, "templates", MappingProxyType(dict(self.templates)))
