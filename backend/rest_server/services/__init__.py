from .etcd import EtcdClient, get_etcd_client, cleanup_etcd_client
from .credential_store import CredentialStore, UserRecord
from .bootstrap import BootstrapSequencer, BootstrapState

__all__ = [
    "EtcdClient",
    "get_etcd_client",
    "cleanup_etcd_client",
    "CredentialStore",
    "UserRecord",
    "BootstrapSequencer",
    "BootstrapState",
]
