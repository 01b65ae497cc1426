"""Prompt templates for each request type.

Every template is a pure function returning the message sequence
(system first, then user) sent to the generation provider.
"""

from ..models import Documents, Message, PromptConfig
from .context import GRAMMAR_DOCUMENT, PACKAGE_DOCUMENT, SAMPLE_DOCUMENT

ASSISTANT_PERSONA = (
    "You are Accord Copilot, an assistant for the Accord Project. You know the "
    "Concerto modeling language, TemplateMark grammars and Cicero templates well."
)

CONCERTO_SYNTAX_NOTES = """\
Concerto essentials:
- A file starts with `namespace org.example@1.0.0` and optional `import` lines.
- Declarations are `concept`, `asset`, `participant`, `transaction`, `event`,
  `enum` and `map`, optionally `abstract`, with `extends` for inheritance.
- Properties are `o Type name` for fields and `--> Type name` for relationships.
- Modifiers: `optional`, `default=...`, `regex=/.../`, `range=[min,max]`,
  and `[]` after a type for arrays.
- Identified declarations use `identified by fieldName`.
"""


def _with_instruction(text: str, config: PromptConfig) -> str:
    if config.instruction:
        return f"{text}\n\nAdditional instruction: {config.instruction}"
    return text


def general_template(config: PromptConfig) -> list[Message]:
    """Free-form chat with no document context."""
    return [
        Message("system", ASSISTANT_PERSONA),
        Message("user", config.instruction or "How can you help me with Concerto?"),
    ]


def inline_template(
    before_cursor: str, after_cursor: str, config: PromptConfig
) -> list[Message]:
    """Inline completion for any language."""
    system = (
        f"{ASSISTANT_PERSONA}\n"
        f"You complete {config.language} code at the cursor. Reply with only the "
        "text to insert at <CURSOR>: no explanations, no markdown fences, and "
        "never repeat text that already surrounds the cursor."
    )
    user = f"{before_cursor}<CURSOR>{after_cursor}"
    return [
        Message("system", system),
        Message("user", _with_instruction(user, config)),
    ]


def concerto_inline_template(
    before_cursor: str, after_cursor: str, config: PromptConfig
) -> list[Message]:
    """Inline completion for Concerto model files."""
    system = (
        f"{ASSISTANT_PERSONA}\n"
        "You complete Concerto model source at the cursor. Reply with only the "
        "text to insert at <CURSOR>: no explanations, no markdown fences, and "
        "never repeat text that already surrounds the cursor. The result must "
        f"keep the file valid Concerto.\n\n{CONCERTO_SYNTAX_NOTES}"
    )
    user = f"{before_cursor}<CURSOR>{after_cursor}"
    return [
        Message("system", system),
        Message("user", _with_instruction(user, config)),
    ]


def fix_template(content: str, config: PromptConfig) -> list[Message]:
    """Explain and fix a reported error in the given document."""
    system = (
        f"{ASSISTANT_PERSONA}\n"
        f"You diagnose errors in {config.language} documents. Explain the cause "
        "briefly, then give the corrected document."
    )
    user = f"Document:\n{content}"
    if config.instruction:
        user = f"{user}\n\nError to fix: {config.instruction}"
    return [Message("system", system), Message("user", user)]


def concerto_model_template(
    documents: Documents,
    config: PromptConfig,
    provider: str,
    relevant_templates: list[str],
    relevant_namespaces: list[str],
    imports: str,
) -> list[Message]:
    """Generate a Concerto model for a template grammar.

    Args:
        documents: Request documents; grammar.tem.md and package.json must
            be present among the context documents
        config: Prompt configuration
        provider: Provider whose embeddings retrieved the context
        relevant_templates: Rendered similar templates (grammar and model)
        relevant_namespaces: Rendered names of related registry models
        imports: Import lines for types from related registry models
    """
    system = (
        f"{ASSISTANT_PERSONA}\n"
        "You write the Concerto model that backs a template grammar. Every "
        "{{variable}} in the grammar must map to a property of the template "
        "model, which is marked with the @template decorator. Reply with only "
        "the model source, no markdown fences. Start the file with the comment "
        f"`// Generated by Accord Copilot ({provider})`.\n\n{CONCERTO_SYNTAX_NOTES}"
    )

    sections = [
        f"Template grammar ({GRAMMAR_DOCUMENT}):\n{documents.find(GRAMMAR_DOCUMENT)}",
        f"Package descriptor ({PACKAGE_DOCUMENT}):\n{documents.find(PACKAGE_DOCUMENT)}",
    ]
    if documents.main.content.strip():
        sections.append(f"Current model draft:\n{documents.main.content}")
    if relevant_templates:
        sections.append("Similar templates:\n" + "\n".join(relevant_templates))
    if relevant_namespaces:
        sections.append("Related registry models:\n" + "".join(relevant_namespaces))
    if imports:
        sections.append(
            "Types from the registry may be imported with these lines, keep only "
            f"the ones you use:\n{imports}"
        )

    user = "\n\n".join(sections)
    return [
        Message("system", system),
        Message("user", _with_instruction(user, config)),
    ]


def grammar_template(
    documents: Documents, config: PromptConfig, relevant_grammar: list[str]
) -> list[Message]:
    """Generate a TemplateMark grammar from sample text."""
    system = (
        f"{ASSISTANT_PERSONA}\n"
        "You turn a contract sample into a TemplateMark grammar by replacing the "
        "variable parts with {{variables}}, {{#clause}} blocks and formulas "
        "where appropriate. Reply with only the grammar, no markdown fences."
    )

    sections = [f"Sample ({SAMPLE_DOCUMENT}):\n{documents.find(SAMPLE_DOCUMENT) or ''}"]
    if relevant_grammar:
        sections.append("Examples of samples and grammars:\n" + "\n".join(relevant_grammar))

    user = "\n\n".join(sections)
    return [
        Message("system", system),
        Message("user", _with_instruction(user, config)),
    ]
