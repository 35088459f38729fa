import asyncio

import pytest

from rest_server.core.config import Settings
from rest_server.services.credential_store import CredentialStore
from rest_server.services.etcd import EtcdResponse

DIR = object()


class FakeKeyValueClient:
    """In-memory stand-in for etcd that records every call.

    Paths follow the etcd v2 rules the credential layer relies on: mkdir on an
    existing key is 403, an update of a missing key is 404, deleting a
    directory needs recursive, parents are created implicitly.
    """

    def __init__(self, delay: float = 0):
        self.nodes = {}
        self.calls = []
        self.writes = []
        self.fail = {}
        self.raise_on = {}
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.healthy = True

    @staticmethod
    def _norm(path):
        return path.strip("/")

    def _mkparents(self, key):
        parts = key.split("/")
        for i in range(1, len(parts)):
            self.nodes.setdefault("/".join(parts[:i]), DIR)

    def _children(self, key):
        prefix = key + "/"
        return sorted(k for k in self.nodes if k.startswith(prefix) and "/" not in k[len(prefix):])

    async def _enter(self, op, path, value=None):
        self.calls.append((op, path))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if (op, path) in self.raise_on:
                raise self.raise_on[(op, path)]
        finally:
            self.in_flight -= 1
        if value is not None:
            self.writes.append((path, value))
        return self.fail.get((op, path))

    async def get(self, path):
        failed = await self._enter("get", path)
        if failed:
            return EtcdResponse(status=failed)
        key = self._norm(path)
        if key not in self.nodes:
            return EtcdResponse(status=404, body={"errorCode": 100, "message": "Key not found"})
        if self.nodes[key] is DIR:
            nodes = [{"key": "/" + child, "dir": self.nodes[child] is DIR} for child in self._children(key)]
            return EtcdResponse(status=200, body={"action": "get", "node": {"key": "/" + key, "dir": True, "nodes": nodes}})
        return EtcdResponse(status=200, body={"action": "get", "node": {"key": "/" + key, "value": self.nodes[key]}})

    async def set(self, path, value, is_update=False):
        failed = await self._enter("set", path, value)
        if failed:
            return EtcdResponse(status=failed)
        key = self._norm(path)
        exists = key in self.nodes
        if is_update and not exists:
            return EtcdResponse(status=404)
        if exists and self.nodes[key] is DIR:
            return EtcdResponse(status=403)
        self._mkparents(key)
        self.nodes[key] = value
        return EtcdResponse(status=200 if exists else 201)

    async def mkdir(self, path):
        failed = await self._enter("mkdir", path)
        if failed:
            return EtcdResponse(status=failed)
        key = self._norm(path)
        if key in self.nodes:
            return EtcdResponse(status=403)
        self._mkparents(key)
        self.nodes[key] = DIR
        return EtcdResponse(status=201)

    async def delete(self, path, recursive=False):
        failed = await self._enter("delete", path)
        if failed:
            return EtcdResponse(status=failed)
        key = self._norm(path)
        if key not in self.nodes:
            return EtcdResponse(status=404)
        if self.nodes[key] is DIR and not recursive:
            return EtcdResponse(status=403)
        for k in [k for k in self.nodes if k == key or k.startswith(key + "/")]:
            del self.nodes[k]
        return EtcdResponse(status=200)

    async def health_check(self):
        return self.healthy

    async def connect(self):
        pass

    async def close(self):
        pass

    def ops(self, op):
        return [path for name, path in self.calls if name == op]


def make_settings(**overrides) -> Settings:
    values = {
        "ETCD_URI": "http://etcd.test:2379",
        "ADMIN_NAME": "admin",
        "ADMIN_PASSWD": "admin-secret",
        "ENV": "development",
        "_env_file": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def fake_client():
    return FakeKeyValueClient()


@pytest.fixture
def store(fake_client):
    return CredentialStore(fake_client)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def settings_factory():
    return make_settings
