"""Chat API endpoints.

Routes:
- POST /chat - Answer a question within a (possibly new) session
- GET /chat/sessions - List sessions, newest first
- GET /chat/{session_id}/messages - Session history in order
- DELETE /chat/{session_id} - Delete a session and its messages

Dependencies: taskdesk.application.services.chat_service, taskdesk.application.services.session_service
System role: Chat messaging HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from taskdesk.api.deps import get_chat_service, get_session_service
from taskdesk.application.services.chat_service import ChatService
from taskdesk.application.services.session_service import SessionService
from taskdesk.core.exceptions import SessionNotFoundError, ValidationError
from taskdesk.models.chat import ChatRequest, ChatResponse
from taskdesk.models.session import ChatMessageView, SessionSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a question with retrieved context and conversational memory.

    Flow:
    1. Process chat through ChatService (session, history, retrieval, answer)
    2. Return answer with the session id and the context used

    Args:
        request: ChatRequest with question and optional sessionId
        chat_service: Injected ChatService

    Returns:
        ChatResponse: Answer, sessionId, context and webResults

    Raises:
        HTTPException(400): Blank question
        HTTPException(500): Processing error
    """
    try:
        return await chat_service.process_chat(
            question=request.question,
            session_id=request.session_id,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.exception(f"{__name__}:chat - {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail="Failed to process chat")


@router.get("/sessions", response_model=list[SessionSummary])
async def list_sessions(
    session_service: SessionService = Depends(get_session_service),
) -> list[SessionSummary]:
    """
    List chat sessions, newest-updated first.

    Returns:
        list[SessionSummary]: id, title, updatedAt and lastMessage per session

    Raises:
        HTTPException(500): Retrieval failed
    """
    try:
        return await session_service.list_sessions()
    except Exception as e:
        logger.exception(f"{__name__}:list_sessions - {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve sessions")


@router.get("/{session_id}/messages", response_model=list[ChatMessageView])
async def get_messages(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> list[ChatMessageView]:
    """
    Get the messages of a session in creation order.

    An unknown session yields an empty list.

    Args:
        session_id: Chat session id
        session_service: Injected SessionService

    Returns:
        list[ChatMessageView]: Messages oldest first

    Raises:
        HTTPException(500): Retrieval failed
    """
    try:
        return await session_service.get_history(session_id)
    except Exception as e:
        logger.exception(f"{__name__}:get_messages - {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve messages")


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> Response:
    """
    Delete session by ID.

    Args:
        session_id: Chat session id
        session_service: Injected SessionService

    Returns:
        204 No Content on success

    Raises:
        HTTPException(404): Session not found
        HTTPException(500): Deletion failed
    """
    try:
        await session_service.delete_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.exception(f"{__name__}:delete_session - {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete session")
    return Response(status_code=204)
