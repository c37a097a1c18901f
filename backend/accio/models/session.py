"""
Session Models - Playground sessions, their chat messages and generated code.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from ..config import settings


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    """Who authored a chat message."""
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single message in a session conversation. Never edited once appended."""
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        # Stored as given: assistant messages keep the raw model text
        if not value.strip():
            raise ValueError("Message content is required")
        return value


class CodeArtifact(BaseModel):
    """
    The current generated component of a session.

    Markup and stylesheet are always produced together; either may be empty
    when the model output did not contain the corresponding block.
    """
    markup: str = ""
    stylesheet: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)

    @property
    def is_empty(self) -> bool:
        return not (self.markup or self.stylesheet)


class Session(BaseModel):
    """A named, owned conversation with at most one current artifact."""
    id: str = Field(default_factory=lambda: uuid4().hex)
    user_id: str
    name: str
    messages: List[ChatMessage] = Field(default_factory=list)
    generated_code: Optional[CodeArtifact] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def has_code(self) -> bool:
        return self.generated_code is not None and not self.generated_code.is_empty


class SessionOut(BaseModel):
    """Session as returned by the API."""
    id: str
    name: str
    messages: List[ChatMessage]
    generated_code: Optional[CodeArtifact] = None
    message_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: Session) -> "SessionOut":
        return cls(
            id=session.id,
            name=session.name,
            messages=session.messages,
            generated_code=session.generated_code,
            message_count=session.message_count,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class SessionCreate(BaseModel):
    """Body for creating or renaming a session."""
    name: str

    @field_validator("name")
    @classmethod
    def name_in_range(cls, value: str) -> str:
        value = value.strip()
        limit = settings.session_name_max_length
        if not value or len(value) > limit:
            raise ValueError(f"Session name must be between 1 and {limit} characters")
        return value


class MessageCreate(BaseModel):
    """Body for appending a message directly to a session."""
    role: MessageRole
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Message content is required")
        return value


class CodeUpdate(BaseModel):
    """Body for overwriting the generated code of a session."""
    markup: Optional[str] = None
    stylesheet: Optional[str] = None
