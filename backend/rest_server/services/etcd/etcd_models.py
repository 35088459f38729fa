"""
Data models and the client interface for the etcd keys API
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

SUCCESS_STATUSES = (200, 201)


@dataclass(frozen=True)
class EtcdResponse:
    """Status and decoded payload of one etcd call"""
    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return self.status in SUCCESS_STATUSES

    @property
    def created(self) -> bool:
        return self.status == 201

    @property
    def node(self) -> Optional[Dict[str, Any]]:
        if isinstance(self.body, dict):
            return self.body.get("node")
        return None

    @property
    def value(self) -> Optional[str]:
        node = self.node
        return node.get("value") if node else None

    @property
    def child_keys(self) -> List[str]:
        """Keys of the direct children of a directory node"""
        node = self.node
        if not node:
            return []
        return [child["key"] for child in node.get("nodes", []) if "key" in child]


class KeyValueClient(Protocol):
    """Operations the credential layer needs from the hierarchical store"""

    async def get(self, path: str) -> EtcdResponse: ...

    async def set(self, path: str, value: str, is_update: bool = False) -> EtcdResponse: ...

    async def mkdir(self, path: str) -> EtcdResponse: ...

    async def delete(self, path: str, recursive: bool = False) -> EtcdResponse: ...
