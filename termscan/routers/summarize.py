import time
from fastapi import APIRouter, Request
from termscan.admission import read_capped
from termscan.errors import ServiceError
from termscan.metrics import record_summarize
from termscan.obs import log
from termscan.sanitize import decode_body
from termscan.schemas import SummarizeRequest, SummarizeResponse, ErrorResponse
from termscan.services import summarize_terms

router = APIRouter(tags=['summarize'])

_request_schema = {
    'requestBody': {
        'required': True,
        'content': {'application/json': {'schema': SummarizeRequest.model_json_schema()}},
    }
}

@router.post(
    '/summarize',
    response_model=SummarizeResponse,
    responses={400: {'model': ErrorResponse}, 413: {'model': ErrorResponse}, 429: {'model': ErrorResponse}, 500: {'model': ErrorResponse}},
    openapi_extra=_request_schema,
)
async def summarize(request: Request):
    start = time.time()
    rid = getattr(request.state, 'request_id', '')
    try:
        # Content-Length can be absent on chunked uploads, so the size is re-checked while reading
        raw = await read_capped(request.stream(), request.app.state.admission.max_payload_bytes)
        result = await summarize_terms(decode_body(raw), request.app.state.completion_client, rid)
    except ServiceError as e:
        log.info('summarize_error', rid=rid, kind=e.kind, status=e.status_code, detail=e.detail)
        record_summarize(e.kind, (time.time() - start) * 1000)
        raise
    except Exception:
        record_summarize(ServiceError.kind, (time.time() - start) * 1000)
        raise
    record_summarize('ok', (time.time() - start) * 1000)
    return result
