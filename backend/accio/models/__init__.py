"""Models module."""

from .user import User, UserCreate, UserLogin, AuthResponse, TokenData
from .session import (
    MessageRole, ChatMessage, CodeArtifact, Session, SessionOut,
    SessionCreate, MessageCreate, CodeUpdate,
)
from .chat import ChatRequest, ChatResponse, CodePayload

__all__ = [
    'User', 'UserCreate', 'UserLogin', 'AuthResponse', 'TokenData',
    'MessageRole', 'ChatMessage', 'CodeArtifact', 'Session', 'SessionOut',
    'SessionCreate', 'MessageCreate', 'CodeUpdate',
    'ChatRequest', 'ChatResponse', 'CodePayload',
]
