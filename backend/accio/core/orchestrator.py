"""
Session Orchestrator - runs one chat turn against a session.

    RECEIVED -> SESSION_VALIDATED -> PROMPT_COMPOSED -> GENERATION_IN_FLIGHT
             -> PARSED_AND_COMMITTED

or ends in REJECTED (bad input / unknown session) or GENERATION_FAILED.
Nothing is written unless the turn reaches the commit, and the commit
writes the user message, the assistant message and the new artifact
together.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from ..models import ChatMessage, CodeArtifact, MessageRole, Session
from ..storage.session_store import SessionStore
from ..utils.keyed_lock import KeyedLock
from .exceptions import GenerationUnavailable, InvalidChatRequest, SessionNotFound
from .generation_client import GenerationClient
from .logging_config import ContextLoggerAdapter
from .prompt_composer import PromptKind, compose_prompt, select_template
from .response_parser import ExtractedCode, extract_code_blocks

logger = logging.getLogger(__name__)


class TurnState(str, Enum):
    RECEIVED = "received"
    SESSION_VALIDATED = "session_validated"
    PROMPT_COMPOSED = "prompt_composed"
    GENERATION_IN_FLIGHT = "generation_in_flight"
    PARSED_AND_COMMITTED = "parsed_and_committed"
    REJECTED = "rejected"
    GENERATION_FAILED = "generation_failed"


@dataclass
class TurnResult:
    """Outcome of a committed turn."""
    message: str
    code: ExtractedCode
    prompt_kind: PromptKind
    session: Session


class SessionOrchestrator:
    """
    Ties the prompt composer, generation client and response parser to the
    session store.

    Concurrent turns on one session are last-write-wins unless
    ``serialize_turns`` is set, in which case they queue per session id.
    No lock is ever held across the provider call otherwise.
    """

    def __init__(
        self,
        store: SessionStore,
        client: GenerationClient,
        max_message_length: int = 2000,
        serialize_turns: bool = False,
    ):
        self.store = store
        self.client = client
        self.max_message_length = max_message_length
        self.serialize_turns = serialize_turns
        self._turn_locks = KeyedLock()

    def _validate_message(self, message: str) -> str:
        text = message.strip() if isinstance(message, str) else ""
        if not text or len(text) > self.max_message_length:
            raise InvalidChatRequest(
                f"Message must be between 1 and {self.max_message_length} characters"
            )
        return text

    async def handle_turn(self, session_id: str, user_id: str, message: str) -> TurnResult:
        """
        Run a full turn and return the committed result.

        Raises:
            InvalidChatRequest: empty or oversized message
            SessionNotFound: session missing, deleted or not owned by user_id
            GenerationUnavailable: the provider call failed
        """
        log = ContextLoggerAdapter(logger, {"session_id": session_id, "user_id": user_id})
        log.debug(f"Turn {TurnState.RECEIVED.value}")

        try:
            text = self._validate_message(message)
        except InvalidChatRequest:
            log.info(f"Turn {TurnState.REJECTED.value}: invalid message")
            raise

        if not self.serialize_turns:
            return await self._run_turn(session_id, user_id, text, log)

        async with self._turn_locks.hold(session_id):
            return await self._run_turn(session_id, user_id, text, log)

    async def _run_turn(
        self, session_id: str, user_id: str, text: str, log: ContextLoggerAdapter
    ) -> TurnResult:
        received_at = datetime.now(timezone.utc)

        session = await self.store.find(session_id, user_id)
        if session is None:
            log.info(f"Turn {TurnState.REJECTED.value}: session not found")
            raise SessionNotFound(session_id)
        log.debug(f"Turn {TurnState.SESSION_VALIDATED.value}")

        kind = select_template(session)
        prompt = compose_prompt(session, text)
        log.debug(f"Turn {TurnState.PROMPT_COMPOSED.value}: template={kind.value}")

        log.debug(f"Turn {TurnState.GENERATION_IN_FLIGHT.value}")
        try:
            raw_text = await self.client.generate(prompt)
        except GenerationUnavailable:
            log.warning(f"Turn {TurnState.GENERATION_FAILED.value}")
            raise

        extracted = extract_code_blocks(raw_text)
        if extracted.is_empty:
            log.info("No labeled code blocks in model output")

        committed = await self.commit_turn(session_id, user_id, text, raw_text, extracted, received_at)
        if committed is None:
            # Deleted while the provider call was in flight
            log.info(f"Turn {TurnState.REJECTED.value}: session gone before commit")
            raise SessionNotFound(session_id)

        log.info(
            f"Turn {TurnState.PARSED_AND_COMMITTED.value}",
            extra={"extra_fields": {
                "template": kind.value,
                "markup_chars": len(extracted.markup),
                "stylesheet_chars": len(extracted.stylesheet),
                "message_count": committed.message_count,
            }}
        )
        return TurnResult(message=raw_text, code=extracted, prompt_kind=kind, session=committed)

    async def commit_turn(
        self,
        session_id: str,
        user_id: str,
        user_text: str,
        raw_text: str,
        extracted: ExtractedCode,
        received_at: Optional[datetime] = None,
    ) -> Optional[Session]:
        """Append both messages and replace the artifact in one store write."""
        now = datetime.now(timezone.utc)
        return await self.store.commit_turn(
            session_id,
            user_id,
            user_message=ChatMessage(role=MessageRole.USER, content=user_text,
                                     timestamp=received_at or now),
            assistant_message=ChatMessage(role=MessageRole.ASSISTANT, content=raw_text,
                                          timestamp=now),
            artifact=CodeArtifact(markup=extracted.markup, stylesheet=extracted.stylesheet,
                                  timestamp=now),
        )
