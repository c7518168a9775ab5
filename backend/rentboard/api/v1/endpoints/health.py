from fastapi import APIRouter

from rentboard.core.config import settings
from rentboard.core.request_metrics import summary as request_metrics_summary

router = APIRouter()


@router.get('/health')
def health():
    """
    Liveness check. ``rpc_configured`` reports whether an aggregation backend
    URL is set; the backend itself is not called here.
    """
    return {
        'ok': True,
        'service': settings.app_name,
        'env': settings.app_env,
        'rpc_configured': bool((settings.rpc_base_url or '').strip()),
    }


@router.get('/health/perf')
def health_perf():
    """Latency percentiles per page/endpoint and per remote procedure."""
    return {
        'service': settings.app_name,
        'latency': request_metrics_summary(),
    }
