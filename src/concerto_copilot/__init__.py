"""concerto-copilot - retrieval-backed prompting for Concerto authoring."""

__version__ = "0.1.0"
__all__ = ["generate"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "generate":
        from .core import generate

        return generate
    raise AttributeError(f"module 'concerto_copilot' has no attribute {name!r}")
