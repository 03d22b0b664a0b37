"""
Chat service for retrieval-augmented Q&A.

Orchestrates one chat turn: session resolution, history, retrieval, a direct
table answer or a model completion with deterministic fallback, language
enforcement, and persistence of both turns.

Dependencies: taskdesk.application.services, taskdesk.boundary.llm, taskdesk.core
System role: Chat service orchestration layer
"""

import logging
from contextlib import nullcontext

from taskdesk.application.services.retrieval_service import RetrievalService
from taskdesk.application.services.session_service import SessionService
from taskdesk.application.services.table_answer_service import TableAnswerService
from taskdesk.boundary.db.models.chat_message_model import MessageRole
from taskdesk.boundary.llm.model_invoker import ModelInvoker
from taskdesk.configs.retrieval import RetrievalSettings
from taskdesk.core.bot.answer_sanitizer import enforce_language
from taskdesk.core.bot.bot_schema import HistoryTurn, RetrievalResult
from taskdesk.core.bot.fallback import NO_INFORMATION_ANSWER
from taskdesk.core.exceptions import ModelUnavailableError, ValidationError
from taskdesk.core.keyed_lock import KeyedLock
from taskdesk.core.text_normalizer import normalize_whitespace
from taskdesk.models.chat import ChatResponse
from taskdesk.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


class ChatService:
    """
    Chat service for conversational Q&A.

    Turns for the same session id are serialized through a shared KeyedLock;
    different sessions run concurrently.
    """

    def __init__(
        self,
        sessions: SessionService,
        retrieval: RetrievalService,
        tables: TableAnswerService,
        invoker: ModelInvoker,
        session_locks: KeyedLock,
        config: RetrievalSettings | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            sessions: Session and history management
            retrieval: Context retrieval and prompt assembly
            tables: Direct answers for table questions
            invoker: Language model adapter
            session_locks: Process-wide per-session locks
            config: History window sizes
        """
        self.sessions = sessions
        self.retrieval = retrieval
        self.tables = tables
        self.invoker = invoker
        self.session_locks = session_locks
        self.config = config or RetrievalSettings()

    async def process_chat(
        self,
        question: str | None,
        session_id: str | None = None,
    ) -> ChatResponse:
        """
        Process a chat message through the full conversation flow.

        Flow:
        1. Validate and normalize the question
        2. Resolve or create the session
        3. Load recent history (last turns feed the prompt)
        4. Retrieve context and build the prompt
        5. Answer from a table, or say nothing was found, or ask the model
        6. Enforce Hebrew output
        7. Persist both turns in one transaction and refresh the cache

        Args:
            question: Raw user question
            session_id: Session to continue, None to start a new one

        Returns:
            ChatResponse: Answer, session id, context and web results

        Raises:
            ValidationError: If the question is blank
            PersistenceError: If the turns cannot be committed
        """
        clean_question = normalize_whitespace(question)
        if not clean_question:
            raise ValidationError("question is required", field="question")

        guard = self.session_locks.hold(session_id) if session_id else nullcontext()
        async with guard:
            return await self._run_turn(clean_question, session_id)

    async def _run_turn(self, question: str, session_id: str | None) -> ChatResponse:
        chat_session = await self.sessions.ensure_session(session_id, title_hint=question)
        current_id = chat_session.id

        recent = await self.sessions.get_history(current_id, limit=self.config.history_window)
        short_history = [
            HistoryTurn(role=message.role, content=message.content)
            for message in recent[-self.config.prompt_history:]
        ] if self.config.prompt_history > 0 else []

        rag = await self.retrieval.build_context(question, short_history)
        answer = await self._answer(question, rag)
        answer = enforce_language(answer, rag.context, rag.web_results)

        metadata = {
            "context": [chunk.model_dump() for chunk in rag.context],
            "webResults": [result.model_dump() for result in rag.web_results],
        }
        await self.sessions.append_turn(current_id, MessageRole.USER.value, question)
        await self.sessions.append_turn(
            current_id,
            MessageRole.ASSISTANT.value,
            answer,
            metadata=metadata,
            title_hint=question,
        )
        await self.sessions.commit_turns(current_id)
        await self.sessions.refresh_cache(current_id)

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:process_chat - Turn stored for session {current_id}",
            session_id=current_id,
            question=question,
            context_chunks=len(rag.context),
            web_results=len(rag.web_results),
            answer_chars=len(answer),
        )
        return ChatResponse(
            answer=answer,
            session_id=current_id,
            context=rag.context,
            web_results=rag.web_results,
        )

    async def _answer(self, question: str, rag: RetrievalResult) -> str:
        """Raw answer before language enforcement."""
        table_answer = await self.tables.answer(question)
        if table_answer:
            return table_answer

        if rag.is_empty or rag.prompt is None:
            logger.info(f"{__name__}:_answer - No context or web results, skipping model")
            return NO_INFORMATION_ANSWER

        try:
            return await self.invoker.complete(rag.prompt.system, rag.prompt.user_prompt)
        except ModelUnavailableError as e:
            logger.warning(f"{__name__}:_answer - Model unavailable, using fallback: {e}")
            return self.invoker.fallback_answer(rag.context, rag.web_results)
