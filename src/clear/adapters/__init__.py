"""Adapters - I/O implementations of ports."""

from .sqlite_store import SqliteStore
from .claude_cli import ClaudeCLIService
from .gemini_api import GeminiService
from .extractors import LLMTaskExtractor, LineExtractor

__all__ = [
    "SqliteStore",
    "ClaudeCLIService",
    "GeminiService",
    "LLMTaskExtractor",
    "LineExtractor",
]
