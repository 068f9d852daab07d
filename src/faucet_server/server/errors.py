import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from faucet_server.faucet import CooldownError, FaucetError

_logger = logging.getLogger(__name__)


async def _faucet_error_handler(request: Request, exc: Exception):
    assert isinstance(exc, FaucetError)
    headers = None
    if isinstance(exc, CooldownError):
        headers = {"Retry-After": str(exc.retry_after)}
    if exc.status_code >= 500:
        _logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code, content={"error": exc.message}, headers=headers
    )


async def _validation_error_handler(request: Request, exc: Exception):
    assert isinstance(exc, RequestValidationError)
    errors = exc.errors()
    message = "Invalid request body"
    if len(errors) > 0:
        error = errors[0]
        loc = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        if loc:
            message = f"Invalid request body: {loc} {error.get('msg', '')}".rstrip()
        else:
            message = f"Invalid request body: {error.get('msg', '')}".rstrip()
    return JSONResponse(status_code=400, content={"error": message})


async def _http_error_handler(request: Request, exc: Exception):
    assert isinstance(exc, StarletteHTTPException)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def add_exception_handlers(app: FastAPI):
    app.add_exception_handler(FaucetError, _faucet_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
