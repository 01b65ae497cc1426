"""JSON corpus ingestion.

The indexer writes two JSON files: one keyed by model file, one keyed
by template name. Provider payload shapes differ per indexer version and
are normalized here, once, so that ranking only ever calls
embedding_for().
"""

import json
import logging
from pathlib import Path
from typing import Any

from ..errors import CorpusError
from . import Corpus
from .models import Embedding, ModelEmbeddings, TemplateEmbeddings, normalize_embedding

logger = logging.getLogger(__name__)

# Keys in a model entry that are not provider payloads
_MODEL_FIELDS = {"fileName", "fileContent"}


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CorpusError(f"Corpus file not found: {path}", e) from e
    except (OSError, UnicodeDecodeError) as e:
        raise CorpusError(f"Failed to read corpus file {path}: {e}", e) from e
    except json.JSONDecodeError as e:
        raise CorpusError(f"Invalid JSON in corpus file {path}: {e}", e) from e

    if not isinstance(data, dict):
        raise CorpusError(f"Corpus file {path} must contain a JSON object")
    return data


def _collect_embeddings(payloads: dict[str, Any]) -> dict[str, Embedding]:
    embeddings = {}
    for provider, raw in payloads.items():
        vector = normalize_embedding(raw)
        if vector is not None:
            embeddings[provider] = vector
    return embeddings


def _text(value: Any, entry: str, field: str, optional: bool = False) -> str | None:
    """Return value if it is a string, else raise CorpusError naming the entry."""
    if value is None and optional:
        return None
    if not isinstance(value, str):
        raise CorpusError(f"{entry} has non-text {field}: {type(value).__name__}")
    return value


def _section(value: Any, entry: str, field: str) -> dict[str, Any]:
    """Return an optional object-valued field, {} when absent."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise CorpusError(f"{entry} has non-object {field}: {type(value).__name__}")
    return value


def parse_models(data: dict[str, Any]) -> dict[str, ModelEmbeddings]:
    """Build model entries from the indexer's models mapping.

    Args:
        data: Mapping of key to {"fileName", "fileContent", <provider>: ...}

    Returns:
        Mapping of the same keys to ModelEmbeddings, in input order

    Raises:
        CorpusError: If an entry is not an object, has no content, or
            holds a non-text fileName or fileContent
    """
    models = {}
    for key, entry in data.items():
        if not isinstance(entry, dict) or "fileContent" not in entry:
            raise CorpusError(f"Model entry {key!r} has no fileContent")
        label = f"Model entry {key!r}"
        providers = {k: v for k, v in entry.items() if k not in _MODEL_FIELDS}
        models[key] = ModelEmbeddings(
            file_name=_text(entry.get("fileName"), label, "fileName", optional=True) or key,
            file_content=_text(entry["fileContent"], label, "fileContent"),
            embeddings=_collect_embeddings(providers),
        )
    return models


def parse_templates(data: dict[str, Any]) -> dict[str, TemplateEmbeddings]:
    """Build template entries from the indexer's templates mapping.

    Args:
        data: Mapping of name to {"grammar": {"content", "embeddings"},
            "sample": {"content"}, "model": {"content"}}

    Returns:
        Mapping of the same names to TemplateEmbeddings, in input order

    Raises:
        CorpusError: If an entry has no grammar content, or a section or
            its content has the wrong type
    """
    templates = {}
    for name, entry in data.items():
        grammar = entry.get("grammar") if isinstance(entry, dict) else None
        if not isinstance(grammar, dict) or "content" not in grammar:
            raise CorpusError(f"Template entry {name!r} has no grammar content")

        label = f"Template entry {name!r}"
        sample = _section(entry.get("sample"), label, "sample")
        model = _section(entry.get("model"), label, "model")
        embeddings = _section(grammar.get("embeddings"), label, "grammar.embeddings")
        templates[name] = TemplateEmbeddings(
            name=name,
            grammar=_text(grammar["content"], label, "grammar.content"),
            sample=_text(sample.get("content", ""), label, "sample.content"),
            model=_text(model.get("content"), label, "model.content", optional=True),
            grammar_embeddings=_collect_embeddings(embeddings),
        )
    return templates


def load_corpus(
    models_path: Path | None = None, templates_path: Path | None = None
) -> Corpus:
    """Load a corpus from the indexer's JSON files.

    Either path may be omitted, leaving that half of the corpus empty.

    Raises:
        CorpusError: If a file is missing, unreadable or malformed
    """
    models = parse_models(_read_json(models_path)) if models_path else {}
    templates = parse_templates(_read_json(templates_path)) if templates_path else {}
    logger.debug(f"Loaded corpus with {len(models)} models, {len(templates)} templates")
    return Corpus(models=models, templates=templates)
