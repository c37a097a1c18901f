"""
Chat API endpoints - run a generation turn against a session.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, status

from ..core.exceptions import GenerationUnavailable, InvalidChatRequest, SessionNotFound
from ..core.orchestrator import SessionOrchestrator
from ..llm.base import LLMProvider
from ..models import ChatRequest, ChatResponse, CodePayload
from ..utils.auth import get_current_user_id
from .dependencies import get_llm_provider, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def send_message(
    request: ChatRequest,
    user_id: str = Depends(get_current_user_id),
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """
    Send a message and get the assistant's answer plus the extracted code.

    Returns:
        ChatResponse: raw assistant text and ``{markup, stylesheet}``

    Raises:
        HTTPException: 404 unknown session, 422 invalid message,
            503 generation unavailable, 500 anything else
    """
    try:
        result = await orchestrator.handle_turn(request.session_id, user_id, request.message)
    except SessionNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    except InvalidChatRequest as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except GenerationUnavailable as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except Exception as e:
        logger.error(
            f"Chat turn failed: {e}",
            exc_info=True,
            extra={"extra_fields": {"session_id": request.session_id, "user_id": user_id}}
        )
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")

    return ChatResponse(
        message=result.message,
        code=CodePayload(markup=result.code.markup, stylesheet=result.code.stylesheet),
    )


@router.get("/models")
async def list_models(
    user_id: str = Depends(get_current_user_id),
    provider: Optional[LLMProvider] = Depends(get_llm_provider),
):
    """Models advertised by the configured provider."""
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI service is not configured"
        )

    try:
        models = await provider.list_models()
    except Exception as e:
        logger.error(f"Model listing failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to fetch AI models"
        )
    return {"models": models}
