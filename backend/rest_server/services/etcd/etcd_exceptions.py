"""
Custom exceptions for the etcd client
"""

from ...core.exceptions import RemoteStoreError


class EtcdConnectionError(RemoteStoreError):
    """Raised when unable to reach etcd"""
    pass


class EtcdTimeoutError(RemoteStoreError):
    """Raised when an etcd request times out"""
    pass


class EtcdRequestError(RemoteStoreError):
    """Raised when a request to etcd cannot be built"""
    pass
