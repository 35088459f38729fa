from fastapi import APIRouter, Depends, Request
from datetime import datetime

from ..deps import get_bootstrap, get_etcd
from ..schemas import HealthResponse
from ...services.bootstrap import BootstrapSequencer
from ...services.etcd import EtcdClient

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(
    request: Request,
    client: EtcdClient = Depends(get_etcd),
    sequencer: BootstrapSequencer = Depends(get_bootstrap)
):
    """Health check endpoint"""
    settings = request.app.state.settings
    etcd_ok = await client.health_check()

    return HealthResponse(
        status="healthy" if etcd_ok else "unhealthy",
        service=settings.APP_NAME,
        version=settings.VERSION,
        timestamp=datetime.now().isoformat(),
        etcd="connected" if etcd_ok else "disconnected",
        bootstrap=sequencer.state.value
    )
