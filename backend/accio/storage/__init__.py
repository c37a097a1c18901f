"""Storage module - provides interface and implementations for data persistence."""

from .interface import StorageInterface
from .local_storage import LocalStorage
from .session_store import SessionStore
from .user_storage import UserStorage, EmailAlreadyRegistered

__all__ = ['StorageInterface', 'LocalStorage', 'SessionStore', 'UserStorage', 'EmailAlreadyRegistered']
