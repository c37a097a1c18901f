"""
Request dependencies - hand out the components wired up in the app lifespan.
"""

from typing import Optional

from fastapi import Request

from ..core.orchestrator import SessionOrchestrator
from ..llm.base import LLMProvider
from ..storage import SessionStore, UserStorage


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_user_storage(request: Request) -> UserStorage:
    return request.app.state.user_storage


def get_orchestrator(request: Request) -> SessionOrchestrator:
    return request.app.state.orchestrator


def get_llm_provider(request: Request) -> Optional[LLMProvider]:
    return request.app.state.llm_provider
