"""
Chat Models - Request and response shapes of the generation endpoint.
"""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """A user turn addressed to one session."""
    # Upper bound is CHAT_MESSAGE_MAX_LENGTH, enforced by the orchestrator
    message: str = Field(..., min_length=1)
    session_id: str = Field(..., min_length=1, alias="sessionId")

    class Config:
        populate_by_name = True


class CodePayload(BaseModel):
    markup: str = ""
    stylesheet: str = ""


class ChatResponse(BaseModel):
    """Raw assistant text plus the artifact extracted from it."""
    message: str
    code: CodePayload
