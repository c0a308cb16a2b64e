# llm/__init__.py
"""
LLM Components Package

- intent_parser: Parse natural language to a SearchFilter
- narrator: Summaries and replies (Anthropic / OpenAI, template fallback)
- prompts: Prompt templates
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .intent_parser import intent_parser, IntentParser, SearchFilter, extract_filters
    from .narrator import Narrator, get_narrator

__all__ = [
    "intent_parser",
    "IntentParser",
    "SearchFilter",
    "extract_filters",
    "Narrator",
    "get_narrator"
]
