"""
Session API endpoints - create, list, rename and delete playground sessions,
and edit their messages and code directly.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.responses import Response

from ..models import (
    ChatMessage,
    CodeArtifact,
    CodeUpdate,
    MessageCreate,
    Session,
    SessionCreate,
    SessionOut,
)
from ..storage import SessionStore
from ..utils.auth import get_current_user_id
from ..utils.export import build_component_zip, export_filename
from .dependencies import get_session_store

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")


def _require(session: Session | None) -> Session:
    if session is None:
        raise _not_found()
    return session


@router.get("")
async def list_sessions(
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_session_store),
):
    """Active sessions of the current user, most recently updated first."""
    sessions = await store.list_for_user(user_id)
    return {"sessions": [SessionOut.from_session(s) for s in sessions]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(
    body: SessionCreate,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_session_store),
):
    session = await store.create(user_id, body.name)
    return {"message": "Session created successfully", "session": SessionOut.from_session(session)}


@router.get("/{session_id}")
async def get_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_session_store),
):
    """A single session with its messages and code."""
    session = _require(await store.find(session_id, user_id))
    return {"session": SessionOut.from_session(session)}


@router.put("/{session_id}")
async def rename_session(
    session_id: str,
    body: SessionCreate,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_session_store),
):
    session = _require(await store.rename(session_id, user_id, body.name))
    return {"message": "Session updated successfully", "session": SessionOut.from_session(session)}


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_session_store),
):
    """Soft delete: the session stays on disk but is no longer visible."""
    _require(await store.soft_delete(session_id, user_id))
    return {"message": "Session deleted successfully"}


@router.post("/{session_id}/messages", status_code=status.HTTP_201_CREATED)
async def add_message(
    session_id: str,
    body: MessageCreate,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_session_store),
):
    message = ChatMessage(role=body.role, content=body.content)
    _require(await store.append_message(session_id, user_id, message))
    return {"message": message}


@router.put("/{session_id}/code")
async def update_code(
    session_id: str,
    body: CodeUpdate,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_session_store),
):
    """Overwrite the session's code; omitted fields become empty."""
    artifact = CodeArtifact(
        markup=body.markup or "",
        stylesheet=body.stylesheet or "",
        timestamp=datetime.now(timezone.utc),
    )
    session = _require(await store.replace_artifact(session_id, user_id, artifact))
    return {"message": "Code updated successfully", "generated_code": session.generated_code}


@router.get("/{session_id}/export")
async def export_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_session_store),
):
    """Download the current component as a zip archive."""
    session = _require(await store.find(session_id, user_id))
    if session.generated_code is None or not session.generated_code.markup:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session has no generated component"
        )

    return Response(
        content=build_component_zip(session),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(session)}"'},
    )
