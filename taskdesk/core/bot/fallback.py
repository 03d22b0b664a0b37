"""
Deterministic extractive fallback answer.

Used whenever the language model cannot be reached: summarizes the top
context and web snippets as bullets so a chat turn always has an answer.

Dependencies: taskdesk.core.text_normalizer
System role: Model-free answer synthesis
"""

from collections.abc import Sequence

from taskdesk.core.bot.bot_schema import ContextChunk, WebResult
from taskdesk.core.text_normalizer import normalize_whitespace

NO_INFORMATION_ANSWER = "לא מצאתי מידע רלוונטי עדיין. נסה לנסח אחרת או להוסיף פרטים."
FALLBACK_HEADER = "מצאתי מידע קשור במערכת:"
FALLBACK_CLOSING = "אם תרצה שאנסה מודל נוסף, שלח את השאלה שוב בעוד כמה רגעים."

MAX_CONTEXT_BULLETS = 4
MAX_WEB_BULLETS = 2
CONTEXT_SNIPPET_CHARS = 200
WEB_SNIPPET_CHARS = 160


def build_fallback_answer(
    context: Sequence[ContextChunk] = (),
    web_results: Sequence[WebResult] = (),
) -> str:
    """
    Summarize retrieved material without calling a model.

    Args:
        context: Retrieved context chunks
        web_results: Optional web snippets

    Returns:
        str: Bulleted summary, or the fixed no-information sentence
    """
    bullets = [
        f"• {chunk.title} ({chunk.source}): "
        f"{normalize_whitespace(chunk.content)[:CONTEXT_SNIPPET_CHARS]}"
        for chunk in context[:MAX_CONTEXT_BULLETS]
    ]
    bullets.extend(
        f"• {result.title}: {normalize_whitespace(result.snippet)[:WEB_SNIPPET_CHARS]}"
        for result in web_results[:MAX_WEB_BULLETS]
    )

    if not bullets:
        return NO_INFORMATION_ANSWER

    return "\n".join([FALLBACK_HEADER, *bullets, FALLBACK_CLOSING])
