import time
import uuid

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rentboard.api.pages import router as pages_router
from rentboard.api.v1.router import router as v1_router
from rentboard.core.config import settings
from rentboard.core.logging_config import log_request, structured_log
from rentboard.core.prod_check import validate_production_config
from rentboard.core.request_metrics import observe
from rentboard.schemas.common import ErrorBody

app = FastAPI(title=settings.app_name, version='1.0.0')

if settings.cors_origins and settings.cors_origins.strip() != '*':
    origins = [o.strip() for o in settings.cors_origins.split(',') if o.strip()]
else:
    origins = [
        'http://localhost:8000', 'http://127.0.0.1:8000',
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=['GET'],
    allow_headers=['*'],
)


@app.middleware('http')
async def trace_and_logging(request: Request, call_next):
    trace_id = request.headers.get('x-trace-id') or str(uuid.uuid4())
    request.state.trace_id = trace_id
    start = time.time()
    try:
        response = await call_next(request)
    except Exception as exc:
        latency = round((time.time() - start) * 1000, 2)
        structured_log(
            'error', 'request_failed',
            trace_id=trace_id, duration_ms=latency,
            endpoint=f'{request.method} {request.url.path}',
            error=str(exc),
        )
        body = ErrorBody(error_code='INTERNAL_ERROR', message='Internal error', details=str(exc), trace_id=trace_id).model_dump()
        headers = {'x-trace-id': trace_id, 'x-latency-ms': str(latency)}
        return JSONResponse(status_code=500, content=body, headers=headers)
    latency = round((time.time() - start) * 1000, 2)
    observe(request.url.path, latency)
    log_request(request.url.path, request.method, trace_id, latency, response.status_code)
    response.headers['x-trace-id'] = trace_id
    response.headers['x-latency-ms'] = str(latency)
    return response


def _trace_id(request: Request) -> str:
    return getattr(request.state, 'trace_id', None) or request.headers.get('x-trace-id') or str(uuid.uuid4())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    trace_id = _trace_id(request)
    if isinstance(exc.detail, dict):
        body = ErrorBody(
            error_code=str(exc.detail.get('error_code') or 'HTTP_ERROR'),
            message=str(exc.detail.get('message') or 'HTTP Error'),
            details=exc.detail.get('details'),
            trace_id=trace_id,
        )
    else:
        body = ErrorBody(error_code='HTTP_ERROR', message=str(exc.detail), trace_id=trace_id)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    body = ErrorBody(
        error_code='INVALID_PAYLOAD',
        message='Invalid request',
        details={'errors': exc.errors()},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=jsonable_encoder(body.model_dump()))


app.include_router(v1_router)
app.include_router(pages_router)


@app.on_event('startup')
def _check_config_on_startup() -> None:
    validate_production_config()


def run() -> None:
    import uvicorn

    uvicorn.run('rentboard.main:app', host='0.0.0.0', port=settings.app_port)
