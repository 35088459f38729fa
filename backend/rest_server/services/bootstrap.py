"""
Startup bootstrap of the users/ namespace and the default administrator.

Runs once per process start. The namespace is checked with a get before any
create is attempted; the default admin is only created in the run that
created the namespace, never on restarts against an existing one.
"""

import asyncio
import logging
from enum import Enum

from ..core.config import Settings
from ..core.exceptions import BootstrapError, RemoteStoreError
from .credential_store import CredentialStore
from .etcd import KeyValueClient
from .user_key_layout import storage_path

logger = logging.getLogger(__name__)


class BootstrapState(str, Enum):
    UNCHECKED = "unchecked"
    NAMESPACE_CHECKED = "namespace_checked"
    NAMESPACE_EXISTS = "namespace_exists"
    NAMESPACE_CREATED = "namespace_created"
    READY = "ready"
    FAILED = "failed"


class BootstrapSequencer:
    """Ensures the storage namespace and default admin exist before serving"""

    def __init__(self, settings: Settings, client: KeyValueClient, credential_store: CredentialStore):
        self.settings = settings
        self.client = client
        self.credential_store = credential_store
        self.state = BootstrapState.UNCHECKED
        self._lock = asyncio.Lock()

    def _fail(self, message: str) -> BootstrapError:
        self.state = BootstrapState.FAILED
        logger.error(message)
        return BootstrapError(message)

    async def run(self) -> BootstrapState:
        """Run the sequence to READY, raising BootstrapError on any failure"""
        if self.settings.is_test:
            logger.info("Test mode, skipping storage bootstrap")
            return self.state

        async with self._lock:
            if self.state == BootstrapState.READY:
                return self.state
            if self.state == BootstrapState.FAILED:
                raise BootstrapError("bootstrap already failed in this process")

            path = storage_path()
            try:
                response = await self.client.get(path)
            except RemoteStoreError as e:
                raise self._fail(f"unable to check storage path {path}: {e}") from e
            self.state = BootstrapState.NAMESPACE_CHECKED

            if response.status == 200:
                logger.info("storage path already exist")
                self.state = BootstrapState.NAMESPACE_EXISTS
            else:
                await self._prepare_storage_path(path)

            self.state = BootstrapState.READY
            return self.state

    async def _prepare_storage_path(self, path: str):
        try:
            response = await self.client.mkdir(path)
        except RemoteStoreError as e:
            raise self._fail(f"unable to create storage path {path}: {e}") from e

        if response.status not in (200, 201):
            raise self._fail(f"unable to create storage path {path}: status {response.status}")
        self.state = BootstrapState.NAMESPACE_CREATED
        logger.info(f"created storage path {path}")

        await self._create_default_admin()

    async def _create_default_admin(self):
        ok, error = await self.credential_store.update(
            self.settings.ADMIN_NAME,
            self.settings.ADMIN_PASSWD,
            admin=True,
            modify=False,
            strict=True,
        )
        if not ok:
            raise self._fail(f"unable to create default admin: {error}")
        logger.info("create default admin successfully")
