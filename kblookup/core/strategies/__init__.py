"""Lexical scoring strategies."""
from .scoring import (
    ContentMatchStrategy,
    FileNameMatchStrategy,
    TermMatchStrategy,
    tokenize_query,
)

__all__ = [
    "ContentMatchStrategy",
    "FileNameMatchStrategy",
    "TermMatchStrategy",
    "tokenize_query",
]
