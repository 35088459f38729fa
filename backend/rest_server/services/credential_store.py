import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Awaitable, Dict, List, Optional, Set, Tuple

from ..core.exceptions import InvalidUsernameError, RemoteStoreError, UserNotFoundError
from . import password_hasher
from .etcd import EtcdResponse, KeyValueClient
from .user_key_layout import (
    storage_path,
    user_admin_path,
    user_passwd_path,
    user_path,
    username_from_key,
)

logger = logging.getLogger(__name__)

Result = Tuple[bool, Optional[Exception]]


@dataclass
class UserRecord:
    """A user as read back from the store"""
    username: str
    password_hash: Optional[str]
    is_admin: bool = False


@dataclass
class _UserLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


def _flag(value: bool) -> str:
    return "true" if value else "false"


class CredentialStore:
    """Creates, updates and removes user records in the key-value store.

    Operations on the same username are serialized with a per-username lock,
    so the password and admin writes of two concurrent updates never
    interleave. Operations on different usernames run concurrently.

    With ``strict_writes`` a failed remote write is returned to the caller as a
    ``RemoteStoreError``; without it the failure is only logged and the update
    still reports success.
    """

    def __init__(self, client: KeyValueClient, strict_writes: bool = True):
        self.client = client
        self.strict_writes = strict_writes
        self._users: Set[str] = set()
        self._locks: Dict[str, _UserLock] = {}

    @asynccontextmanager
    async def _locked(self, username: str):
        """Hold the username's lock; the entry is dropped once nobody waits on it"""
        entry = self._locks.get(username)
        if entry is None:
            entry = self._locks[username] = _UserLock()
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[username]

    def has_user(self, username: str) -> bool:
        return username in self._users

    @property
    def users(self) -> List[str]:
        return sorted(self._users)

    async def _checked(self, action: str, path: str, request: Awaitable[EtcdResponse]) -> Optional[RemoteStoreError]:
        """Await a remote call and turn any failure into a RemoteStoreError"""
        try:
            response = await request
        except RemoteStoreError as e:
            logger.error(f"{action} {path} failed: {e}")
            return e

        if not response.ok:
            logger.error(f"{action} {path} returned {response.status}: {response.body}")
            return RemoteStoreError(f"{action} {path} returned status {response.status}", status=response.status)
        return None

    async def _create_user_dir(self, username: str) -> Optional[RemoteStoreError]:
        user_dir = user_path(username)
        return await self._checked("mkdir", user_dir, self.client.mkdir(user_dir))

    async def update(
        self,
        username: str,
        password: str,
        admin: Optional[bool] = None,
        modify: bool = False,
        strict: Optional[bool] = None,
    ) -> Result:
        """Create (modify=False) or update (modify=True) a user's credentials.

        The admin flag is only written when it is not None. On the create path
        the leaves are written only after the user directory exists, so a
        failed strict create leaves the store untouched. ``strict`` overrides
        the store-wide ``strict_writes`` for this call.
        """
        strict = self.strict_writes if strict is None else strict
        try:
            passwd_path = user_passwd_path(username)
        except InvalidUsernameError as e:
            return False, e

        async with self._locked(username):
            try:
                derived_key = await password_hasher.derive_async(username, password)
            except Exception as e:
                logger.error(f"Failed to derive password hash for {username}: {e}")
                return False, e

            errors = []
            if not modify:
                error = await self._create_user_dir(username)
                if error is not None:
                    if strict:
                        return False, error
                    errors.append(error)

            writes = [self._checked("set", passwd_path, self.client.set(passwd_path, derived_key, is_update=modify))]
            if admin is not None:
                admin_path = user_admin_path(username)
                writes.append(self._checked("set", admin_path, self.client.set(admin_path, _flag(admin))))

            errors.extend(error for error in await asyncio.gather(*writes) if error is not None)

            if errors:
                if strict:
                    return False, errors[0]
                logger.warning(f"Remote writes for {username} failed, reporting success anyway")

            self._users.add(username)

        logger.info(f"{'updated' if modify else 'created'} user {username}")
        return True, None

    async def remove(self, username: str) -> Result:
        """Delete a tracked user's whole subtree after confirming it exists"""
        try:
            path = user_path(username)
        except InvalidUsernameError as e:
            return False, e

        if username not in self._users:
            return False, UserNotFoundError(username)

        async with self._locked(username):
            # another remove may have finished while we waited
            if username not in self._users:
                return False, UserNotFoundError(username)

            try:
                response = await self.client.get(path)
            except RemoteStoreError as e:
                logger.error(f"get {path} failed: {e}")
                return False, e

            if response.status == 404:
                self._users.discard(username)
                return False, UserNotFoundError(username)
            if not response.ok:
                logger.error(f"get {path} returned {response.status}: {response.body}")
                return False, RemoteStoreError(f"get {path} returned status {response.status}", status=response.status)

            error = await self._checked("delete", path, self.client.delete(path, recursive=True))
            if error is not None:
                return False, error

            self._users.discard(username)

        logger.info(f"removed user {username}")
        return True, None

    async def get_user(self, username: str) -> Tuple[Optional[UserRecord], Optional[Exception]]:
        """Read a user's password hash and admin flag"""
        try:
            passwd_path = user_passwd_path(username)
            admin_path = user_admin_path(username)
        except InvalidUsernameError as e:
            return None, e

        async with self._locked(username):
            try:
                passwd, admin = await asyncio.gather(self.client.get(passwd_path), self.client.get(admin_path))
            except RemoteStoreError as e:
                logger.error(f"Failed to read user {username}: {e}")
                return None, e

            if passwd.status == 404:
                self._users.discard(username)
                return None, UserNotFoundError(username)
            if not passwd.ok:
                return None, RemoteStoreError(f"get {passwd_path} returned status {passwd.status}", status=passwd.status)

            self._users.add(username)

        return UserRecord(
            username=username,
            password_hash=passwd.value,
            is_admin=admin.ok and admin.value == "true",
        ), None

    async def verify_credentials(self, username: str, password: str) -> bool:
        record, error = await self.get_user(username)
        if error is not None or not record.password_hash:
            return False
        return await asyncio.to_thread(password_hasher.verify, username, password, record.password_hash)

    async def load_users(self) -> Result:
        """Seed local user tracking from the users/ namespace"""
        path = storage_path()
        try:
            response = await self.client.get(path)
        except RemoteStoreError as e:
            logger.error(f"Failed to list users: {e}")
            return False, e

        if not response.ok:
            return False, RemoteStoreError(f"get {path} returned status {response.status}", status=response.status)

        self._users = {username_from_key(key) for key in response.child_keys}
        logger.info(f"Tracking {len(self._users)} existing users")
        return True, None
