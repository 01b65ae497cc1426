"""Request data models with validation."""

from dataclasses import dataclass, field
from enum import Enum

from .errors import UnsupportedRequestTypeError

CONCERTO_LANGUAGE = "concerto"


class RequestType(Enum):
    """Kinds of authoring request the planner knows how to prompt for."""

    INLINE = "inline"
    FIX = "fix"
    GENERAL = "general"
    MODEL = "model"
    GRAMMAR = "grammar"

    @classmethod
    def parse(cls, value: "RequestType | str") -> "RequestType":
        """Resolve a member from itself or its string value.

        Raises:
            UnsupportedRequestTypeError: If value names no request type
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnsupportedRequestTypeError(value)


@dataclass(frozen=True)
class PromptConfig:
    """Describes a single authoring request.

    Args:
        request_type: Request type, or its string value
        language: Target language of the main document
        instruction: Optional free-text instruction from the user
    """

    request_type: RequestType
    language: str = CONCERTO_LANGUAGE
    instruction: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "request_type", RequestType.parse(self.request_type))

    @property
    def is_concerto(self) -> bool:
        return self.language.lower() == CONCERTO_LANGUAGE


@dataclass
class DocumentDetails:
    """The document being edited."""

    content: str
    cursor_position: int | None = None


@dataclass
class ContextDocument:
    """An auxiliary document, looked up by file name."""

    file_name: str
    content: str


@dataclass
class Documents:
    """Main document plus ordered context documents."""

    main: DocumentDetails
    context_documents: list[ContextDocument] = field(default_factory=list)

    def find(self, file_name: str) -> str | None:
        """Return the content of the first context document named file_name."""
        for document in self.context_documents:
            if document.file_name == file_name:
                return document.content
        return None


@dataclass(frozen=True)
class GenerationParams:
    """Generation tuning parameters.

    Args:
        max_tokens: Upper bound on generated tokens
        temperature: Sampling temperature (0.0-2.0)
        top_p: Nucleus sampling mass (0.0-1.0)
        frequency_penalty: Frequency penalty (-2.0-2.0)
        presence_penalty: Presence penalty (-2.0-2.0)
    """

    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None

    def __post_init__(self) -> None:
        """Validate generation parameters."""
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ValueError("max_tokens must be positive")
        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ValueError("temperature must be between 0.0 and 2.0")
        if self.top_p is not None and not 0.0 <= self.top_p <= 1.0:
            raise ValueError("top_p must be between 0.0 and 1.0")
        if (
            self.frequency_penalty is not None
            and not -2.0 <= self.frequency_penalty <= 2.0
        ):
            raise ValueError("frequency_penalty must be between -2.0 and 2.0")
        if (
            self.presence_penalty is not None
            and not -2.0 <= self.presence_penalty <= 2.0
        ):
            raise ValueError("presence_penalty must be between -2.0 and 2.0")


@dataclass(frozen=True)
class ModelConfig:
    """Provider identity, credentials and tuning for one request.

    access_token is always present but may be empty for inline, fix and
    general prompts that are only rendered, never sent to a provider.
    """

    provider: str
    access_token: str
    llm_model: str | None = None
    api_url: str | None = None
    embedding_model: str | None = None
    params: GenerationParams = field(default_factory=GenerationParams)

    def __post_init__(self) -> None:
        if not self.provider or not self.provider.strip():
            raise ValueError("provider cannot be empty")


@dataclass(frozen=True)
class Message:
    """A single role-tagged chat message."""

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}
