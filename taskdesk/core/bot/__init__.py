"""
Chat bot core.

Pure prompt assembly, fallback answers, answer language enforcement and
direct table answers. No I/O.
"""

from taskdesk.core.bot.answer_sanitizer import REFUSAL_ANSWER, enforce_language
from taskdesk.core.bot.bot_schema import AssembledPrompt, ContextChunk, RetrievalResult, WebResult
from taskdesk.core.bot.fallback import NO_INFORMATION_ANSWER, build_fallback_answer
from taskdesk.core.bot.prompt_builder import build_prompt

__all__ = [
    "AssembledPrompt",
    "ContextChunk",
    "NO_INFORMATION_ANSWER",
    "REFUSAL_ANSWER",
    "RetrievalResult",
    "WebResult",
    "build_fallback_answer",
    "build_prompt",
    "enforce_language",
]
