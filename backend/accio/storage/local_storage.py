"""
Local Filesystem Storage Implementation.
Stores every document under one base directory on the server.
"""

import logging
import os
from pathlib import Path
from typing import Optional, List
from uuid import uuid4

import aiofiles

from .interface import StorageInterface

logger = logging.getLogger(__name__)


class LocalStorage(StorageInterface):
    """Filesystem-backed storage rooted at ``base_dir``."""

    def __init__(self, base_dir: str = "./data"):
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, path: str) -> Path:
        """Resolve a relative path, refusing anything outside base_dir."""
        full_path = (self.base_dir / path).resolve()
        if full_path != self.base_dir and self.base_dir not in full_path.parents:
            raise ValueError(f"Invalid path: {path} - path traversal detected")
        return full_path

    async def save(self, path: str, content: bytes | str) -> bool:
        """
        Write to a private temp file then rename, so readers never see half a
        document and concurrent writers never share a temp file.
        """
        tmp_path = None
        try:
            full_path = self._get_full_path(path)
            full_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = full_path.with_name(f"{full_path.name}.{uuid4().hex}.tmp")

            if isinstance(content, str):
                async with aiofiles.open(tmp_path, 'w', encoding='utf-8') as f:
                    await f.write(content)
            else:
                async with aiofiles.open(tmp_path, 'wb') as f:
                    await f.write(content)

            os.replace(tmp_path, full_path)
            tmp_path = None
            return True
        except (OSError, ValueError) as e:
            logger.error(f"Error saving file {path}: {e}")
            return False
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

    async def load(self, path: str) -> Optional[bytes]:
        try:
            full_path = self._get_full_path(path)
            if not full_path.exists():
                return None

            async with aiofiles.open(full_path, 'rb') as f:
                return await f.read()
        except (OSError, ValueError) as e:
            logger.error(f"Error loading file {path}: {e}")
            return None

    async def exists(self, path: str) -> bool:
        try:
            return self._get_full_path(path).exists()
        except ValueError:
            return False

    async def delete(self, path: str) -> bool:
        try:
            full_path = self._get_full_path(path)
            if full_path.exists():
                full_path.unlink()
                return True
            return False
        except (OSError, ValueError) as e:
            logger.error(f"Error deleting file {path}: {e}")
            return False

    async def list(self, path: str, pattern: Optional[str] = None) -> List[str]:
        try:
            full_path = self._get_full_path(path)
            if not full_path.is_dir():
                return []

            files = [p for p in full_path.glob(pattern or "*") if p.is_file()]
            return sorted(
                str(p.relative_to(self.base_dir).as_posix())
                for p in files
                if not p.name.endswith(".tmp")
            )
        except (OSError, ValueError) as e:
            logger.error(f"Error listing files in {path}: {e}")
            return []
