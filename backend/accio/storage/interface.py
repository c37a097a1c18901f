"""
Storage Interface - Abstract base class for blob storage backends.
Session and user documents are persisted through this contract, so a
different backend can replace the local filesystem without touching callers.
"""

from abc import ABC, abstractmethod
from typing import Optional, List


class StorageInterface(ABC):
    """Contract shared by every storage implementation."""

    @abstractmethod
    async def save(self, path: str, content: bytes | str) -> bool:
        """
        Save content to the specified path, replacing any previous content.

        Args:
            path: Relative path (e.g., "sessions/<user_id>/<session_id>.json")
            content: bytes or text to write

        Returns:
            bool: True if save was successful, False otherwise
        """
        pass

    @abstractmethod
    async def load(self, path: str) -> Optional[bytes]:
        """
        Load content from the specified path.

        Returns:
            Optional[bytes]: File content, or None if the file doesn't exist
        """
        pass

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if a file exists at the specified path."""
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """Delete the file at the specified path. Returns True if something was removed."""
        pass

    @abstractmethod
    async def list(self, path: str, pattern: Optional[str] = None) -> List[str]:
        """
        List files directly under a directory.

        Args:
            path: Directory path to list
            pattern: Optional glob pattern to filter files (e.g., "*.json")

        Returns:
            List[str]: Sorted relative file paths
        """
        pass
