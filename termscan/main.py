import time
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from termscan.admission import AdmissionState, RateLimiter, admit
from termscan.config import Settings
from termscan.errors import ServiceError, AdmissionError
from termscan.llm import CompletionClient
from termscan.metrics import observe_ms, inc
from termscan.obs import log, new_request_id, setup_logging, should_sample
from termscan.routers.ops import router as ops_router
from termscan.routers.summarize import router as summarize_router

SECURITY_HEADERS = {
    'X-Frame-Options': 'DENY',
    'X-Content-Type-Options': 'nosniff',
    'Referrer-Policy': 'no-referrer',
}


def error_response(exc: ServiceError, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)

def internal_error_response() -> JSONResponse:
    return JSONResponse(status_code=500, content={'error': ServiceError.public_message})

def client_identity(request: Request) -> str:
    return request.client.host if request.client else 'unknown'


def create_app(settings: Optional[Settings] = None,
               completion_client: Optional[CompletionClient] = None,
               limiter: Optional[RateLimiter] = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL)
    app = FastAPI(title='Terms & Privacy Summarizer')
    app.state.settings = settings
    app.state.admission = AdmissionState(allowlist=settings.origin_allowlist, limiter=limiter or RateLimiter())
    app.state.completion_client = completion_client or CompletionClient(api_key=settings.OPENAI_API_KEY)

    @app.middleware('http')
    async def admission_gate(request: Request, call_next):
        state: AdmissionState = request.app.state.admission
        client = client_identity(request)
        try:
            decision = admit(state, client, request.headers.get('origin'), request.headers.get('content-length'))
        except AdmissionError as e:
            inc('admission_rejected_total')
            log.info('admission_rejected', reason=e.kind, client=client, detail=e.detail)
            return error_response(e, e.headers())
        response = await call_next(request)
        response.headers.update(decision.headers())
        return response

    @app.middleware('http')
    async def request_context(request: Request, call_next):
        rid = new_request_id()
        request.state.request_id = rid
        start = time.time()
        try:
            response = await call_next(request)
        except Exception as exc:
            # built here rather than in all_errors so the 500 still gets the headers below
            log.error('unhandled_error', rid=rid, path=request.url.path, error=repr(exc), exc_info=exc)
            response = internal_error_response()
        for k, v in SECURITY_HEADERS.items():
            response.headers[k] = v
        response.headers['X-Request-ID'] = rid
        dt = int((time.time() - start) * 1000)
        observe_ms('http_request_ms', dt)
        if should_sample(settings.SAMPLE_RATE):
            log.info('http_request', rid=rid, path=request.url.path, method=request.method,
                     status=response.status_code, ms=dt)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.origin_allowlist) or ['*'],
        allow_methods=['*'],
        allow_headers=['*'],
    )

    @app.exception_handler(ServiceError)
    async def service_errors(request: Request, exc: ServiceError):
        return error_response(exc)

    @app.exception_handler(Exception)
    async def all_errors(request: Request, exc: Exception):
        log.error('unhandled_error', path=request.url.path, error=repr(exc), exc_info=exc)
        return internal_error_response()

    app.include_router(ops_router)
    app.include_router(summarize_router)

    log.info('app_configured', port=settings.PORT, permissive_cors=app.state.admission.permissive_cors,
             allowlist=list(settings.origin_allowlist), api_key_set=bool(settings.OPENAI_API_KEY))
    return app


app = create_app()
