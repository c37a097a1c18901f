"""
Exception types raised by the session and generation pipeline.
"""


class AccioError(Exception):
    """Base class for errors the API layer knows how to translate."""


class InvalidChatRequest(AccioError):
    """The turn was rejected before any external call (bad or oversized message)."""


class SessionNotFound(AccioError):
    """The session is absent, soft-deleted, or owned by someone else."""

    def __init__(self, session_id: str):
        super().__init__("Session not found")
        self.session_id = session_id


class GenerationUnavailable(AccioError):
    """
    The text-generation service could not produce a response.

    Deliberately carries no provider detail; the cause is logged where it
    is caught.
    """

    def __init__(self):
        super().__init__("AI service is temporarily unavailable. Please try again later.")


class SessionStoreError(AccioError):
    """A session document could not be written."""


class UserStoreError(AccioError):
    """A user document or the email index could not be written."""
