"""Prompt assembly for authoring requests."""

from .context import generate_embedding_prompt
from .planner import build_prompt, split_at_cursor

__all__ = ["build_prompt", "generate_embedding_prompt", "split_at_cursor"]
