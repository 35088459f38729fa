from .etcd_client import EtcdClient, get_etcd_client, cleanup_etcd_client
from .etcd_models import EtcdResponse, KeyValueClient
from .etcd_exceptions import EtcdConnectionError, EtcdRequestError, EtcdTimeoutError

__all__ = [
    "EtcdClient",
    "get_etcd_client",
    "cleanup_etcd_client",
    "EtcdResponse",
    "KeyValueClient",
    "EtcdConnectionError",
    "EtcdTimeoutError",
    "EtcdRequestError",
]
