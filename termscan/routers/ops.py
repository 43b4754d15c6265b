from fastapi import APIRouter, Response
from termscan.metrics import snapshot_metrics, prometheus_payload
from termscan.schemas import HealthResponse

router = APIRouter(prefix='', tags=['ops'])

@router.get('/', response_model=HealthResponse)
def root():
    return {'status': 'ok'}

@router.get('/health', response_model=HealthResponse)
def health():
    return {'status': 'ok'}

@router.get('/metrics')
def metrics():
    return snapshot_metrics()

@router.get('/metrics.prom')
def metrics_prom():
    payload, content_type = prometheus_payload()
    return Response(payload, media_type=content_type)
