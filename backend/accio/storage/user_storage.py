"""
User Storage - Persistent storage for accounts using StorageInterface.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Optional
from uuid import uuid4

from ..core.exceptions import AccioError, UserStoreError
from ..utils.keyed_lock import KeyedLock
from .interface import StorageInterface

logger = logging.getLogger(__name__)


class EmailAlreadyRegistered(AccioError):
    """Raised when registering an email that already has an account."""


class UserStorage:
    """
    Manages persistent storage of user data.
    One JSON file per user under ``users/``, plus an email -> user_id index.
    """

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.users_dir = "users"
        self._email_index_path = f"{self.users_dir}/email_index.json"
        self._locks = KeyedLock()

    async def _load_email_index(self) -> Dict[str, str]:
        content = await self.storage.load(self._email_index_path)
        if content is None:
            return {}
        try:
            return json.loads(content.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Corrupt email index: {e}")
            return {}

    async def _save_email_index(self, index: Dict[str, str]) -> bool:
        return await self.storage.save(self._email_index_path, json.dumps(index, indent=2))

    @staticmethod
    def _decode_user(content: bytes) -> Optional[Dict]:
        try:
            user_data = json.loads(content.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Corrupt user document: {e}")
            return None
        for key in ('created_at', 'updated_at'):
            if key in user_data:
                user_data[key] = datetime.fromisoformat(user_data[key])
        return user_data

    async def get_user(self, user_id: str) -> Optional[Dict]:
        """
        Get user by user_id.

        Returns:
            Optional[Dict]: User data or None if not found
        """
        content = await self.storage.load(f"{self.users_dir}/{user_id}.json")
        if content is None:
            return None
        return self._decode_user(content)

    async def get_user_by_email(self, email: str) -> Optional[Dict]:
        index = await self._load_email_index()
        user_id = index.get(email.lower())
        if user_id is None:
            return None
        return await self.get_user(user_id)

    async def create_user(
        self,
        email: str,
        hashed_password: str,
        name: Optional[str] = None,
    ) -> Dict:
        """
        Create a new user.

        The index check, the user write and the index write run under one
        lock so overlapping registrations neither drop index entries nor
        claim the same email twice.

        Raises:
            EmailAlreadyRegistered: if the email is taken
            UserStoreError: if the user or the index could not be written
        """
        async with self._locks.hold(self._email_index_path):
            return await self._create_user(email, hashed_password, name)

    async def _create_user(self, email: str, hashed_password: str, name: Optional[str]) -> Dict:
        index = await self._load_email_index()
        if email.lower() in index:
            raise EmailAlreadyRegistered(email)

        now = datetime.now(timezone.utc)
        user_id = uuid4().hex
        user_data = {
            "user_id": user_id,
            "email": email,
            "name": name,
            "hashed_password": hashed_password,
            "created_at": now.isoformat(),
            "updated_at": now.isoformat(),
            "is_active": True,
        }

        content = json.dumps(user_data, indent=2, ensure_ascii=False)
        user_path = f"{self.users_dir}/{user_id}.json"
        if not await self.storage.save(user_path, content):
            raise UserStoreError(f"Failed to save user {user_id}")

        index[email.lower()] = user_id
        if not await self._save_email_index(index):
            await self.storage.delete(user_path)
            raise UserStoreError("Failed to save email index")

        logger.info("User registered", extra={"extra_fields": {"user_id": user_id}})

        user_data['created_at'] = now
        user_data['updated_at'] = now
        return user_data
