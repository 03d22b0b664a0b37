"""
Test suite for chat prompt assembly.

System role: Verification of prompt shape for the chat bot
"""

from taskdesk.core.bot.bot_schema import ContextChunk, HistoryTurn, WebResult
from taskdesk.core.bot.prompt_builder import (
    NO_CONTEXT_LINE,
    RESPONSE_DIRECTIVES,
    SYSTEM_PROMPT,
    build_prompt,
)


class TestBuildPrompt:
    """Test suite for build_prompt."""

    def test_build_prompt_should_use_fixed_system_text(self) -> None:
        """Test system text is the fixed Hebrew instruction."""
        prompt = build_prompt("מה שלומך?")

        assert prompt.system == SYSTEM_PROMPT

    def test_build_prompt_without_context_should_state_no_context(self) -> None:
        """Test empty context renders the no-context sentence and no history block."""
        # Act
        prompt = build_prompt("מה שלומך?")

        # Assert
        assert prompt.user_prompt.startswith("שאלה: מה שלומך?")
        assert NO_CONTEXT_LINE in prompt.user_prompt
        assert "היסטוריה:" not in prompt.user_prompt
        assert "תקציר מידע עדכני מהאינטרנט" not in prompt.user_prompt
        assert prompt.user_prompt.endswith(RESPONSE_DIRECTIVES[-1])

    def test_build_prompt_should_render_blocks_in_order(self) -> None:
        """Test question, history, context, web and directives keep their order."""
        # Arrange
        history = [
            HistoryTurn(role="user", content="שאלה קודמת"),
            HistoryTurn(role="assistant", content="תשובה קודמת"),
        ]
        context = [ContextChunk(title="מדריך התקנה", source="note", content="שלב   ראשון")]
        web = [WebResult(title="כתבה", url="https://example.com", snippet="תקציר")]

        # Act
        text = build_prompt("איך מתקינים?", history, context, web).user_prompt

        # Assert
        positions = [
            text.index("שאלה: איך מתקינים?"),
            text.index("User: שאלה קודמת"),
            text.index("Assistant: תשובה קודמת"),
            text.index("1. מדריך התקנה (note)\nשלב ראשון"),
            text.index("1. כתבה\nתקציר\nhttps://example.com"),
            text.index(RESPONSE_DIRECTIVES[0]),
        ]
        assert positions == sorted(positions)
        assert NO_CONTEXT_LINE not in text

    def test_to_messages_should_return_system_then_human(self) -> None:
        """Test conversion to langchain messages."""
        # Act
        messages = build_prompt("שאלה").to_messages()

        # Assert
        assert [message.type for message in messages] == ["system", "human"]
        assert messages[0].content == SYSTEM_PROMPT
