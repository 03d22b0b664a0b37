"""
Chat prompt assembly.

Renders the fixed Hebrew instruction text, recent conversation history and
retrieved context into a single model-ready request. Deterministic and free
of I/O so prompt shape can be asserted directly in tests.

Dependencies: taskdesk.core.text_normalizer
System role: Prompt template for the chat bot
"""

from collections.abc import Sequence

from taskdesk.core.bot.bot_schema import AssembledPrompt, ContextChunk, HistoryTurn, WebResult
from taskdesk.core.text_normalizer import normalize_whitespace

SYSTEM_PROMPT = normalize_whitespace(
    """אתה עוזר מוצר בכיר, עונה בעברית בלבד בסגנון אנושי וטבעי.
    דבר טבעי ונעים, 1-3 משפטים קצרים וברורים.
    אל תכתוב באנגלית, ערבית, סינית או כל שפה אחרת; אם מופיע טקסט זר, תרגם לעברית או השמט.
    הסתמך רק על ההקשרים שסופקו (הערות, מדריכים, משימות, טבלאות, מועדפים). אם אין מידע מספיק, אמור זאת בפשטות.
    אל תמציא עובדות או דוגמאות שלא קיימות בהקשר."""
)

NO_CONTEXT_LINE = "אין הקשר פנימי רלוונטי."

RESPONSE_DIRECTIVES = (
    "הנחיות מענה:",
    "- השב בעברית טבעית בלבד, בלי אנגלית/ערבית/סינית או תעתיק. אם יש טקסט זר, תרגם או השמט.",
    "- ענה רק לפי המידע בקונטקסט; אם חסר מידע, כתוב שאינך יודע.",
    "- אם השאלה מתייחסת לטבלה, פרט מתוך הנתונים: שמות עמודות, מספר שורות, ושורות רלוונטיות או ערכים מבוקשים.",
    "- אם ניתן להסיק מסקנה פשוטה (לדוגמה: מהו הערך הגבוה ביותר, כמה רשומות יש), כתוב אותה ישירות ובקצרה.",
    "- אל תחזור על השאלה, אל תבקש הבהרות אם המידע קיים, ואל תוסיף דוגמאות שלא הופיעו בהקשר.",
)


def _render_history(history: Sequence[HistoryTurn]) -> str:
    return "\n".join(
        f"{'User' if turn.role == 'user' else 'Assistant'}: {normalize_whitespace(turn.content)}"
        for turn in history
    )


def _render_context(context: Sequence[ContextChunk]) -> str:
    return "\n\n".join(
        f"{idx}. {chunk.title} ({chunk.source})\n{normalize_whitespace(chunk.content)}"
        for idx, chunk in enumerate(context, start=1)
    )


def _render_web(web_results: Sequence[WebResult]) -> str:
    return "\n\n".join(
        f"{idx}. {result.title}\n{normalize_whitespace(result.snippet)}\n{result.url}"
        for idx, result in enumerate(web_results, start=1)
    )


def build_prompt(
    question: str,
    history: Sequence[HistoryTurn] = (),
    context: Sequence[ContextChunk] = (),
    web_results: Sequence[WebResult] = (),
) -> AssembledPrompt:
    """
    Build the system text and user prompt for one chat turn.

    Blocks appear in fixed order: question, history (if any), context or the
    no-context sentence, web results (if any), response directives.

    Args:
        question: Normalized user question
        history: Recent conversation turns, oldest first
        context: Retrieved context chunks
        web_results: Optional web snippets

    Returns:
        AssembledPrompt: System and user prompt strings
    """
    history_block = _render_history(history)
    context_block = _render_context(context)
    web_block = _render_web(web_results)

    parts = [
        f"שאלה: {question}",
        f"היסטוריה:\n{history_block}" if history_block else "",
        f"הקשר פנימי רלוונטי:\n{context_block}" if context_block else NO_CONTEXT_LINE,
        f"תקציר מידע עדכני מהאינטרנט:\n{web_block}" if web_block else "",
        *RESPONSE_DIRECTIVES,
    ]

    return AssembledPrompt(
        system=SYSTEM_PROMPT,
        user_prompt="\n\n".join(part for part in parts if part),
    )
