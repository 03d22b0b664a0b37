"""
Test suite for ChatService.

End-to-end chat turns over in-memory SQLite and the in-memory cache with a
mocked model invoker and mocked vector/web stages.

System role: Verification of chat turn orchestration
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.application.services.chat_service import ChatService
from taskdesk.application.services.retrieval_service import RetrievalService
from taskdesk.application.services.session_service import SessionService
from taskdesk.application.services.table_answer_service import TableAnswerService, pick_table
from taskdesk.boundary.cache.history_cache import HistoryCache
from taskdesk.boundary.db.CRUD.chat_message_crud import chat_message_crud
from taskdesk.boundary.db.CRUD.chat_session_crud import chat_session_crud
from taskdesk.boundary.db.CRUD.content_crud import data_table_crud, note_crud
from taskdesk.boundary.db.models.content_models import DataTableModel
from taskdesk.configs.retrieval import RetrievalSettings
from taskdesk.core.bot.fallback import FALLBACK_HEADER, NO_INFORMATION_ANSWER
from taskdesk.core.exceptions import ModelUnavailableError, ValidationError
from taskdesk.core.keyed_lock import KeyedLock
from taskdesk.models.table import TableData


@pytest.fixture
def session_service(test_async_db: AsyncSession, history_cache: HistoryCache) -> SessionService:
    """Provide SessionService over SQLite and the in-memory cache."""
    return SessionService(db=test_async_db, cache=history_cache)


@pytest.fixture
def chat_service(
    test_async_db: AsyncSession,
    session_service: SessionService,
    mock_invoker: MagicMock,
) -> ChatService:
    """Provide ChatService with real retrieval over SQLite and mocked outer stages."""
    embeddings = MagicMock()
    embeddings.search = AsyncMock(return_value=[])
    embeddings.config.search_limit = 3
    config = RetrievalSettings(web_search_enabled=False)
    retrieval = RetrievalService(
        db=test_async_db,
        embeddings=embeddings,
        web_client=MagicMock(),
        config=config,
    )
    return ChatService(
        sessions=session_service,
        retrieval=retrieval,
        tables=TableAnswerService(db=test_async_db),
        invoker=mock_invoker,
        session_locks=KeyedLock(),
        config=config,
    )


class TestPickTable:
    """Test suite for pick_table."""

    def test_pick_table_should_prefer_example_table(self) -> None:
        """Test a table named like an example wins over recency."""
        recent = DataTableModel(name="הוצאות", columns=[], rows=[])
        example = DataTableModel(name="טבלת דוגמא", columns=[], rows=[])

        assert pick_table([recent, example], "מה יש בטבלה?") is example

    def test_pick_table_should_default_to_most_recent(self) -> None:
        """Test the newest table is used when nothing else matches."""
        recent = DataTableModel(name="הוצאות", columns=[], rows=[])
        older = DataTableModel(name="הכנסות", columns=[], rows=[])

        assert pick_table([recent, older], "מה יש בטבלה?") is recent
        assert pick_table([], "טבלה") is None


class TestProcessChat:
    """Test suite for ChatService.process_chat."""

    @pytest.mark.asyncio
    async def test_table_question_should_answer_from_table(
        self, chat_service: ChatService, test_async_db: AsyncSession, mock_invoker: MagicMock
    ) -> None:
        """Test highest-score questions are answered from the grid without the model."""
        # Arrange
        await data_table_crud.create_table(
            test_async_db,
            TableData(
                name="דוגמא",
                columns=["שם", "ציון"],
                rows=[["דנה", 70], ["יואב", 95], ["עומר", 60]],
            ),
        )

        # Act
        response = await chat_service.process_chat("מה הציון הגבוה ביותר בטבלה?")

        # Assert
        assert "95" in response.answer
        assert "יואב" in response.answer
        assert response.context[0].source == "table"
        mock_invoker.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_store_should_return_no_information(
        self, chat_service: ChatService, test_async_db: AsyncSession, mock_invoker: MagicMock
    ) -> None:
        """Test an empty database yields the fixed sentence and still persists the turn."""
        # Act
        response = await chat_service.process_chat("מה קורה?")

        # Assert
        assert response.context == []
        assert response.answer == NO_INFORMATION_ANSWER
        mock_invoker.complete.assert_not_awaited()
        assert await chat_message_crud.count_for_session(test_async_db, response.session_id) == 2

    @pytest.mark.asyncio
    async def test_blank_question_should_raise_without_persisting(
        self, chat_service: ChatService, test_async_db: AsyncSession
    ) -> None:
        """Test blank questions are rejected before any session is created."""
        with pytest.raises(ValidationError):
            await chat_service.process_chat("   ")

        assert await chat_session_crud.count(test_async_db) == 0

    @pytest.mark.asyncio
    async def test_model_answer_should_be_returned_and_persisted(
        self, chat_service: ChatService, test_async_db: AsyncSession, mock_invoker: MagicMock
    ) -> None:
        """Test context is sent to the model and both turns are stored."""
        # Arrange
        await note_crud.create(test_async_db, title="מדריך התקנה", content="מריצים את המתקין")

        # Act
        response = await chat_service.process_chat("התקנה")

        # Assert
        assert response.answer == "תשובה מהמודל"
        system, user_prompt = mock_invoker.complete.await_args.args
        assert "מריצים את המתקין" in user_prompt
        messages = await chat_message_crud.list_for_session(test_async_db, response.session_id)
        assert [(m.role, m.content) for m in messages] == [
            ("user", "התקנה"),
            ("assistant", "תשובה מהמודל"),
        ]
        assert messages[1].message_metadata["context"][0]["title"] == "מדריך התקנה"
        assert messages[1].message_metadata["webResults"] == []

    @pytest.mark.asyncio
    async def test_model_timeout_should_use_fallback_and_persist(
        self, chat_service: ChatService, test_async_db: AsyncSession, mock_invoker: MagicMock
    ) -> None:
        """Test an unavailable model still yields an answer and a stored turn."""
        # Arrange
        await note_crud.create(test_async_db, title="מדריך התקנה", content="מריצים את המתקין")
        mock_invoker.complete.side_effect = ModelUnavailableError("timed out", provider="ollama")

        # Act
        response = await chat_service.process_chat("התקנה")

        # Assert
        assert response.answer.startswith(FALLBACK_HEADER)
        assert "מריצים את המתקין" in response.answer
        assert await chat_message_crud.count_for_session(test_async_db, response.session_id) == 2

    @pytest.mark.asyncio
    async def test_foreign_model_output_should_be_restricted(
        self, chat_service: ChatService, test_async_db: AsyncSession, mock_invoker: MagicMock
    ) -> None:
        """Test model output is cleaned to Hebrew before it is returned."""
        await note_crud.create(test_async_db, title="מדריך התקנה", content="מריצים את המתקין")
        mock_invoker.complete.return_value = "Sure <b>מריצים את המתקין.</b>"

        response = await chat_service.process_chat("התקנה")

        assert response.answer == "מריצים את המתקין."

    @pytest.mark.asyncio
    async def test_sequential_turns_should_share_session_history(
        self, chat_service: ChatService, session_service: SessionService, mock_invoker: MagicMock
    ) -> None:
        """Test two turns on one session store four messages in call order."""
        # Act
        first = await chat_service.process_chat("שאלה ראשונה")
        second = await chat_service.process_chat("שאלה שנייה", session_id=first.session_id)
        history = await session_service.get_history(first.session_id)

        # Assert
        assert second.session_id == first.session_id
        assert [(m.role, m.content) for m in history] == [
            ("user", "שאלה ראשונה"),
            ("assistant", NO_INFORMATION_ANSWER),
            ("user", "שאלה שנייה"),
            ("assistant", NO_INFORMATION_ANSWER),
        ]

    @pytest.mark.asyncio
    async def test_new_session_should_take_title_from_question(
        self, chat_service: ChatService, test_async_db: AsyncSession
    ) -> None:
        """Test a new session is titled after its first question."""
        response = await chat_service.process_chat("איך פותחים משימה חדשה?")

        chat_session = await chat_session_crud.get_by_id(test_async_db, response.session_id)
        assert chat_session.title == "איך פותחים משימה חדשה?"

    @pytest.mark.asyncio
    async def test_same_session_turns_should_not_interleave(
        self, chat_service: ChatService, session_service: SessionService
    ) -> None:
        """Test concurrent turns on one session are serialized."""
        # Arrange
        first = await chat_service.process_chat("פתיחה")

        # Act
        await asyncio.gather(
            chat_service.process_chat("א", session_id=first.session_id),
            chat_service.process_chat("ב", session_id=first.session_id),
        )
        history = await session_service.get_history(first.session_id)

        # Assert
        roles = [m.role for m in history]
        assert roles == ["user", "assistant"] * 3
