"""Typer CLI definition for concerto-copilot."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import typer

from .config import generate_config, load_config
from .core import generate as generate_text
from .core import load_default_corpus
from .corpus.loader import load_corpus
from .corpus.namespaces import get_namespace_imports
from .errors import (
    CopilotError,
    MissingDocumentError,
    ProviderError,
    UnknownProviderError,
    UnsupportedRequestTypeError,
)
from .models import (
    CONCERTO_LANGUAGE,
    ContextDocument,
    DocumentDetails,
    Documents,
    PromptConfig,
    RequestType,
)
from .prompting import build_prompt

app = typer.Typer(help="Retrieval-backed AI assistance for Concerto authoring")

RequestTypeOption = typer.Option(
    "general",
    "-t",
    "--type",
    help="Request type: inline, fix, general, model or grammar",
)
LanguageOption = typer.Option(
    CONCERTO_LANGUAGE, "-l", "--language", help="Language of the main document"
)
InstructionOption = typer.Option(
    None, "-i", "--instruction", help="Free-text instruction or error message"
)
FileOption = typer.Option(None, "-f", "--file", help="Read the main document from file")
CursorOption = typer.Option(
    None, "--cursor", help="Cursor offset in the main document (default: end)"
)
ContextOption = typer.Option(
    None,
    "-c",
    "--context",
    help="Context document; its file name is the lookup key (repeatable)",
)
ProviderOption = typer.Option(
    None, "-p", "--provider", help="LLM provider (from config if omitted)"
)
ModelOption = typer.Option(None, "-m", "--model", help="Chat model (from config if omitted)")
DebugOption = typer.Option(False, "--debug", help="Show verbose errors and debug logs")


def _configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def _fail(message: str, error: Exception, debug: bool) -> typer.Exit:
    if debug:
        typer.echo(f"Debug - {message}: {error!r}", err=True)
    else:
        typer.echo(f"Error: {error}", err=True)
    return typer.Exit(1)


def _read_text(path: Path, debug: bool) -> str:
    try:
        return path.read_text()
    except FileNotFoundError as e:
        raise _fail(f"File not found: {path}", e, debug) from None
    except PermissionError as e:
        raise _fail(f"Permission denied: {path}", e, debug) from None
    except UnicodeDecodeError as e:
        raise _fail(f"Unable to decode file as text: {path}", e, debug) from None


def read_main_text(text: str | None, file: Path | None, debug: bool) -> str:
    """Resolve the main document from argument, file or stdin, in that order."""
    if text is not None:
        return text
    if file is not None:
        return _read_text(file, debug)
    if not sys.stdin.isatty():
        return sys.stdin.read()
    return ""


def build_documents(
    content: str, cursor: int | None, context: list[Path] | None, debug: bool
) -> Documents:
    """Assemble Documents from the main text and context files."""
    if cursor is not None and not 0 <= cursor <= len(content):
        raise _fail(
            "Invalid cursor",
            ValueError(f"cursor must be between 0 and {len(content)}, got {cursor}"),
            debug,
        )
    return Documents(
        main=DocumentDetails(content=content, cursor_position=cursor),
        context_documents=[
            ContextDocument(file_name=path.name, content=_read_text(path, debug))
            for path in context or []
        ],
    )


def _prompt_config(
    request_type: str, language: str, instruction: str | None, debug: bool
) -> PromptConfig:
    try:
        return PromptConfig(request_type, language, instruction)
    except UnsupportedRequestTypeError as e:
        raise _fail("Unsupported request type", e, debug) from None


def _run(coro, debug: bool):  # type: ignore[no-untyped-def]
    try:
        return asyncio.run(coro)
    except MissingDocumentError as e:
        raise _fail("Missing document", e, debug) from None
    except ProviderError as e:
        if debug and e.provider_message:
            typer.echo(f"Debug - Provider message: {e.provider_message}", err=True)
        raise _fail("Provider error", e, debug) from None
    except UnknownProviderError as e:
        raise _fail("Unknown provider", e, debug) from None
    except CopilotError as e:
        raise _fail("Copilot error", e, debug) from None


@app.command()
def prompt(
    text: str | None = typer.Argument(None, help="Main document text"),
    request_type: str = RequestTypeOption,
    language: str = LanguageOption,
    instruction: str | None = InstructionOption,
    file: Path | None = FileOption,
    cursor: int | None = CursorOption,
    context: list[Path] | None = ContextOption,
    provider: str | None = ProviderOption,
    model: str | None = ModelOption,
    debug: bool = DebugOption,
) -> None:
    """Print the message sequence a request would send, as JSON."""
    _configure_logging(debug)
    config = load_config()
    prompt_config = _prompt_config(request_type, language, instruction, debug)
    documents = build_documents(read_main_text(text, file, debug), cursor, context, debug)
    # Only retrieval-backed requests call the provider while prompting
    needs_token = prompt_config.request_type in (RequestType.MODEL, RequestType.GRAMMAR)
    model_config = config.model_config(
        provider=provider, model=model, require_token=needs_token
    )

    try:
        corpus = load_default_corpus(config)
    except CopilotError as e:
        raise _fail("Corpus error", e, debug) from None

    messages = _run(build_prompt(documents, prompt_config, model_config, corpus), debug)
    typer.echo(json.dumps([message.to_dict() for message in messages], indent=2))


@app.command()
def generate(
    text: str | None = typer.Argument(None, help="Main document text"),
    request_type: str = RequestTypeOption,
    language: str = LanguageOption,
    instruction: str | None = InstructionOption,
    file: Path | None = FileOption,
    cursor: int | None = CursorOption,
    context: list[Path] | None = ContextOption,
    provider: str | None = ProviderOption,
    model: str | None = ModelOption,
    debug: bool = DebugOption,
) -> None:
    """Send a request to the configured provider and print the reply."""
    _configure_logging(debug)
    config = load_config()
    prompt_config = _prompt_config(request_type, language, instruction, debug)
    documents = build_documents(read_main_text(text, file, debug), cursor, context, debug)
    model_config = config.model_config(provider=provider, model=model)

    try:
        corpus = load_default_corpus(config)
    except CopilotError as e:
        raise _fail("Corpus error", e, debug) from None

    reply = _run(generate_text(documents, prompt_config, model_config, corpus), debug)
    typer.echo(reply)


@app.command()
def imports(
    models: Path = typer.Argument(..., help="Models corpus JSON file"),
    debug: bool = DebugOption,
) -> None:
    """Print registry import lines for every model in a corpus file."""
    _configure_logging(debug)
    try:
        corpus = load_corpus(models_path=models)
    except CopilotError as e:
        raise _fail("Corpus error", e, debug) from None
    typer.echo(get_namespace_imports(corpus.models), nl=False)


@app.command("init-config")
def init_config(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config"),
) -> None:
    """Write the default config file."""
    from .config import CONFIG_PATH

    if CONFIG_PATH.exists() and not force:
        typer.echo(f"Config already exists at {CONFIG_PATH} (use --force to overwrite)")
        raise typer.Exit(1)
    path = generate_config()
    typer.echo(f"Wrote {path}")
