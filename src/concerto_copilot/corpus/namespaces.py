"""Import synthesis for declared Concerto types.

Types are resolved against the Accord Project model registry, which
serves each model file at <registry>/accordproject/<file name>.
"""

import re
from collections.abc import Mapping
from pathlib import PurePosixPath

from .models import ModelEmbeddings

REGISTRY_BASE_URL = "https://models.accordproject.org"

# Only these declaration keywords are recognized; concept, transaction,
# event and map declarations are not picked up.
_DECLARATION = re.compile(r"\b(?:asset|participant|enum|abstract asset)\s+(\w+)")


def extract_namespaces(file_content: str) -> list[str]:
    """Return declared type names in order of appearance, duplicates kept."""
    return _DECLARATION.findall(file_content)


def get_namespace_mappings(models: Mapping[str, ModelEmbeddings]) -> dict[str, list[str]]:
    """Map each model's file name to the type names it declares."""
    return {
        model.file_name: extract_namespaces(model.file_content)
        for model in models.values()
    }


def generate_imports(
    namespace_mappings: Mapping[str, list[str]],
    registry_url: str = REGISTRY_BASE_URL,
) -> str:
    """Render one import line per file that declares at least one type.

    Args:
        namespace_mappings: File name to declared type names
        registry_url: Base URL of the model registry

    Returns:
        Newline-terminated import lines, in mapping order
    """
    lines = []
    for file_name, names in namespace_mappings.items():
        if not names:
            continue
        namespace = f"org.accordproject.{PurePosixPath(file_name).stem}"
        source = f"{registry_url}/accordproject/{file_name}"
        if len(names) == 1:
            lines.append(f"import {namespace}.{names[0]} from {source}\n")
        else:
            lines.append(f"import {namespace}.{{ {', '.join(names)} }} from {source}\n")
    return "".join(lines)


def get_namespace_imports(models: Mapping[str, ModelEmbeddings]) -> str:
    """Build the import block for every model in models."""
    return generate_imports(get_namespace_mappings(models))
