"""
Answer language enforcement.

Guarantees the user only ever sees Hebrew output: model text is cleaned and
restricted to the target script, and when nothing usable survives the answer
degrades through fixed templates down to a refusal sentence.

Dependencies: taskdesk.core.text_normalizer, taskdesk.core.bot.fallback
System role: Output guard between the model invoker and the user
"""

import logging
from collections.abc import Sequence

from taskdesk.core.bot.bot_schema import ContextChunk, WebResult
from taskdesk.core.bot.fallback import build_fallback_answer
from taskdesk.core.text_normalizer import (
    has_digit,
    has_target_script,
    normalize_whitespace,
    restrict_to_target_script,
    strip_markup,
)

logger = logging.getLogger(__name__)

NUMERIC_TEMPLATE = "הערך הוא {value}"
TABLE_TEMPLATE = "על בסיס המידע הקיים: {content}"
REFUSAL_ANSWER = "לא הצלחתי לנסח תשובה בעברית על סמך המידע הקיים."


def _is_usable(text: str) -> bool:
    return has_target_script(text) and len(text) > 1


def enforce_language(
    raw_answer: str | None,
    context: Sequence[ContextChunk] = (),
    web_results: Sequence[WebResult] = (),
) -> str:
    """
    Return a Hebrew answer derived from raw model output.

    Chain, first success wins: restricted answer, numeric template, table
    quote, restricted fallback answer, refusal sentence.

    Args:
        raw_answer: Text produced by the model or a templated answer
        context: Context chunks used for the turn
        web_results: Web snippets used for the turn

    Returns:
        str: Non-empty Hebrew text
    """
    restricted = restrict_to_target_script(strip_markup(raw_answer))
    if _is_usable(restricted):
        return restricted

    if restricted and has_digit(restricted):
        return NUMERIC_TEMPLATE.format(value=restricted)

    table_chunk = next((chunk for chunk in context if chunk.is_table), None)
    if table_chunk is not None:
        logger.info(f"{__name__}:enforce_language - answering from table context")
        return TABLE_TEMPLATE.format(content=normalize_whitespace(table_chunk.content))

    fallback = restrict_to_target_script(build_fallback_answer(context, web_results))
    if _is_usable(fallback):
        logger.info(f"{__name__}:enforce_language - answering from restricted fallback")
        return fallback

    logger.warning(f"{__name__}:enforce_language - no Hebrew answer could be composed")
    return REFUSAL_ANSWER
