"""
Async client for the etcd v2 keys API
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .etcd_exceptions import EtcdConnectionError, EtcdRequestError, EtcdTimeoutError
from .etcd_models import EtcdResponse

logger = logging.getLogger(__name__)

KEYS_PREFIX = "/v2/keys/"


class EtcdClient:
    """Thin async wrapper over the etcd keys API.

    One instance is shared by the whole process. Calls return the HTTP status
    and decoded body instead of raising on non-success statuses; only timeouts
    and transport failures raise, as ``RemoteStoreError`` subclasses.
    """

    def __init__(self, base_url: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry"""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

    async def connect(self):
        """Create the underlying HTTP client"""
        if self._client:
            await self._client.aclose()

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )
        logger.info(f"etcd client ready for {self.base_url}")

    async def close(self):
        """Close the underlying HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("etcd client closed")

    @property
    def connected(self) -> bool:
        return self._client is not None

    async def health_check(self) -> bool:
        """Check that etcd answers its version endpoint"""
        if not self._client:
            return False

        try:
            response = await self._client.get("/version")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"etcd health check failed: {e}")
            return False

    async def _request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> EtcdResponse:
        if not self._client:
            await self.connect()

        url = KEYS_PREFIX + quote(path.lstrip("/"), safe="/")
        try:
            response = await self._client.request(method, url, data=data, params=params)
        except httpx.TimeoutException as e:
            logger.error(f"etcd {method} {path} timed out after {self.timeout}s")
            raise EtcdTimeoutError(f"etcd {method} {path} timed out") from e
        except httpx.RequestError as e:
            logger.error(f"etcd {method} {path} failed: {e}")
            raise EtcdConnectionError(f"Cannot reach etcd at {self.base_url}: {e}") from e
        except httpx.InvalidURL as e:
            logger.error(f"etcd {method} {path} is not a valid key URL: {e}")
            raise EtcdRequestError(f"invalid etcd key {path!r}: {e}") from e

        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = response.text

        logger.info(f"etcd {method} {path} -> {response.status_code}")
        return EtcdResponse(status=response.status_code, body=body)

    async def get(self, path: str) -> EtcdResponse:
        return await self._request("GET", path)

    async def set(self, path: str, value: str, is_update: bool = False) -> EtcdResponse:
        """Write a leaf value; with is_update the key must already exist"""
        params = {"prevExist": "true"} if is_update else None
        return await self._request("PUT", path, data={"value": value}, params=params)

    async def mkdir(self, path: str) -> EtcdResponse:
        return await self._request("PUT", path, data={"dir": "true"})

    async def delete(self, path: str, recursive: bool = False) -> EtcdResponse:
        params = {"recursive": "true"} if recursive else None
        return await self._request("DELETE", path, params=params)


# Singleton instance
_etcd_client: Optional[EtcdClient] = None


def get_etcd_client(base_url: Optional[str] = None, timeout: Optional[float] = None) -> EtcdClient:
    """Get the process-wide EtcdClient, creating it on first use"""
    global _etcd_client
    if _etcd_client is None:
        if base_url is None:
            from ...core.config import get_settings
            settings = get_settings()
            base_url = settings.ETCD_URI
            timeout = timeout or settings.ETCD_TIMEOUT
        _etcd_client = EtcdClient(base_url, timeout=timeout or 10.0)
    return _etcd_client


async def cleanup_etcd_client():
    """Close and drop the process-wide client"""
    global _etcd_client
    if _etcd_client is not None:
        await _etcd_client.close()
        _etcd_client = None
