"""Custom copilot exceptions."""

from enum import Enum


class CopilotError(Exception):
    """Base exception for copilot-related errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class MissingDocumentError(CopilotError):
    """Exception raised when a required context document is absent.

    Model generation needs both "grammar.tem.md" and "package.json"
    among the context documents.
    """

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Required documents are missing: {', '.join(missing)}")
        self.missing = missing


class UnsupportedRequestTypeError(CopilotError):
    """Exception raised for a request type outside the known set."""

    def __init__(self, request_type: object) -> None:
        super().__init__(f"Unsupported request type: {request_type!r}")
        self.request_type = request_type


class UnknownProviderError(CopilotError, KeyError):
    """Exception raised when no provider is registered under a name.

    Subclasses KeyError so registry lookups keep their mapping semantics.
    """

    def __init__(self, name: str, available: list[str]) -> None:
        listed = ", ".join(available) if available else "none"
        super().__init__(f"Provider '{name}' not found. Available providers: {listed}")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class CorpusError(CopilotError):
    """Exception raised when a corpus file cannot be read or parsed."""

    pass


class FailureKind(Enum):
    """Where a provider call went wrong."""

    SERVER = "server"  # server answered with an error status
    TRANSPORT = "transport"  # request never reached the server
    PROCESSING = "processing"  # response could not be understood


class ProviderError(CopilotError):
    """Exception raised for LLM provider communication errors.

    This typically occurs when:
    - API server rejects the request (4xx/5xx status)
    - Network connectivity issues prevent the request
    - The response body is missing expected fields
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        kind: FailureKind = FailureKind.PROCESSING,
        provider_message: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code
        self.kind = kind
        self.provider_message = provider_message


class GenerationError(ProviderError):
    """Exception raised when content generation fails."""

    pass


class EmbeddingError(ProviderError):
    """Exception raised when embedding generation fails."""

    pass
