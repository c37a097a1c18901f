"""
Session Store - Persistent storage of playground sessions using StorageInterface.

Each session is one JSON document at ``sessions/<user_id>/<session_id>.json``.
Every mutation is a read-modify-write of the whole document, serialized per
session id inside this process.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError

from ..core.exceptions import SessionStoreError
from ..models import ChatMessage, CodeArtifact, Session
from ..utils.keyed_lock import KeyedLock
from .interface import StorageInterface

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class SessionStore:
    """
    Manages persistent storage of sessions.

    Lookups only ever return active sessions owned by the given user; an
    inactive or foreign session is indistinguishable from a missing one.
    """

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.sessions_dir = "sessions"
        self._locks = KeyedLock()

    def _session_path(self, user_id: str, session_id: str) -> str:
        return f"{self.sessions_dir}/{user_id}/{session_id}.json"

    async def _load(self, session_id: str, user_id: str) -> Optional[Session]:
        if not (_ID_PATTERN.match(session_id or "") and _ID_PATTERN.match(user_id or "")):
            return None

        content = await self.storage.load(self._session_path(user_id, session_id))
        if content is None:
            return None

        try:
            session = Session.model_validate_json(content)
        except ValidationError as e:
            logger.error(f"Corrupt session document {session_id}: {e}")
            return None

        if session.user_id != user_id:
            return None
        return session

    async def save(self, session: Session) -> Session:
        """
        Write the session document, replacing whatever was stored.

        Raises:
            SessionStoreError: if the backend refused the write
        """
        path = self._session_path(session.user_id, session.id)
        if not await self.storage.save(path, session.model_dump_json(indent=2)):
            raise SessionStoreError(f"Failed to write session {session.id}")
        return session

    async def create(self, user_id: str, name: str) -> Session:
        """Create an empty session: no messages, no generated code."""
        session = Session(user_id=user_id, name=name)
        await self.save(session)
        logger.info(
            "Session created",
            extra={"extra_fields": {"session_id": session.id, "user_id": user_id}}
        )
        return session

    async def find(self, session_id: str, user_id: str) -> Optional[Session]:
        """Return the active session owned by ``user_id``, or None."""
        session = await self._load(session_id, user_id)
        if session is None or not session.is_active:
            return None
        return session

    async def list_for_user(self, user_id: str) -> List[Session]:
        """Active sessions of a user, most recently updated first."""
        if not _ID_PATTERN.match(user_id or ""):
            return []

        files = await self.storage.list(f"{self.sessions_dir}/{user_id}", pattern="*.json")
        sessions = []
        for file_path in files:
            session_id = file_path.rsplit('/', 1)[-1][:-len(".json")]
            session = await self.find(session_id, user_id)
            if session is not None:
                sessions.append(session)

        sessions.sort(key=lambda s: s.updated_at, reverse=True)
        return sessions

    async def _mutate(
        self,
        session_id: str,
        user_id: str,
        change: Callable[[Session], None],
    ) -> Optional[Session]:
        """Apply ``change`` to the stored session as one locked read-modify-write."""
        async with self._locks.hold(session_id):
            session = await self.find(session_id, user_id)
            if session is None:
                return None
            change(session)
            session.updated_at = datetime.now(timezone.utc)
            return await self.save(session)

    async def rename(self, session_id: str, user_id: str, name: str) -> Optional[Session]:
        def change(session: Session) -> None:
            session.name = name

        return await self._mutate(session_id, user_id, change)

    async def soft_delete(self, session_id: str, user_id: str) -> Optional[Session]:
        """Mark the session inactive. Returns None if it was already gone."""
        def change(session: Session) -> None:
            session.is_active = False

        session = await self._mutate(session_id, user_id, change)
        if session is not None:
            logger.info(
                "Session deleted",
                extra={"extra_fields": {"session_id": session_id, "user_id": user_id}}
            )
        return session

    async def append_message(
        self, session_id: str, user_id: str, message: ChatMessage
    ) -> Optional[Session]:
        def change(session: Session) -> None:
            session.messages.append(message)

        return await self._mutate(session_id, user_id, change)

    async def replace_artifact(
        self, session_id: str, user_id: str, artifact: CodeArtifact
    ) -> Optional[Session]:
        def change(session: Session) -> None:
            session.generated_code = artifact

        return await self._mutate(session_id, user_id, change)

    async def commit_turn(
        self,
        session_id: str,
        user_id: str,
        user_message: ChatMessage,
        assistant_message: ChatMessage,
        artifact: CodeArtifact,
    ) -> Optional[Session]:
        """
        Append the user and assistant messages and replace the artifact in a
        single document write.
        """
        def change(session: Session) -> None:
            session.messages.append(user_message)
            session.messages.append(assistant_message)
            session.generated_code = artifact

        return await self._mutate(session_id, user_id, change)
