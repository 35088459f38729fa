from fastapi import Request

from ..services.bootstrap import BootstrapSequencer
from ..services.credential_store import CredentialStore
from ..services.etcd import EtcdClient


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credential_store


def get_etcd(request: Request) -> EtcdClient:
    return request.app.state.etcd_client


def get_bootstrap(request: Request) -> BootstrapSequencer:
    return request.app.state.bootstrap
