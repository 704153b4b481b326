"""
Request Middleware
Provides request_id injection, timing and global error handling.

Every error leaves the API as {"message", "statusCode", "request_id"} so clients
can show the server-provided message directly.
"""
import logging
from typing import Callable
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from dynaform.core.logging import (
    api_logger,
    begin_request,
    end_request,
    generate_request_id,
    get_request_id,
)

HEALTH_PATHS = ('/health', '/healthz', '/readyz')


def _error_response(request: Request, status_code: int, message, **extra) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', None) or get_request_id() or 'unknown'
    content = {
        'message': message,
        'statusCode': status_code,
        'request_id': request_id,
    }
    content.update(extra)
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers={'X-Request-ID': request_id},
    )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Assigns or propagates X-Request-ID, starts the request clock and logs a
    one-line summary per request. Health probes are not logged.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get('X-Request-ID') or generate_request_id()
        begin_request(request_id)
        request.state.request_id = request_id

        path = request.url.path
        quiet = path.endswith(HEALTH_PATHS)
        if not quiet:
            api_logger.debug(
                f"{request.method} {path}",
                client=request.client.host if request.client else 'unknown',
            )

        try:
            response = await call_next(request)
            response.headers['X-Request-ID'] = request_id

            if not quiet:
                level = logging.INFO if response.status_code < 400 else logging.WARNING
                api_logger.log(level, f"{request.method} {path} -> {response.status_code}", status=response.status_code)

            return response

        except Exception as e:
            api_logger.error(f"{request.method} {path} -> 500 (unhandled)", error=e)
            return _error_response(request, 500, 'Internal server error')
        finally:
            end_request()


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.
    Returns safe JSON response with request_id for debugging.
    """
    api_logger.error(
        f"Unhandled exception in {request.method} {request.url.path}",
        error=exc,
        path=str(request.url.path),
    )
    return _error_response(request, 500, 'Internal server error')


async def http_exception_handler(request: Request, exc) -> JSONResponse:
    """
    Handler for HTTPException - renders the detail as the error message.
    """
    status_code = getattr(exc, 'status_code', 500)
    detail = getattr(exc, 'detail', 'Unknown error')

    if status_code >= 500:
        api_logger.error(
            f"HTTP {status_code}: {detail}",
            path=str(request.url.path),
            status=status_code,
        )
    elif status_code >= 400:
        api_logger.warning(
            f"HTTP {status_code}: {detail}",
            path=str(request.url.path),
            status=status_code,
        )

    return _error_response(request, status_code, detail)


async def validation_exception_handler(request: Request, exc) -> JSONResponse:
    """
    Handler for RequestValidationError - 400 with per-field errors.
    """
    errors = []
    for error in exc.errors():
        errors.append({
            'field': '.'.join(str(loc) for loc in error.get('loc', []) if loc != 'body'),
            'message': error.get('msg', 'Validation error'),
            'type': error.get('type', 'value_error'),
        })

    api_logger.warning(
        f"Validation error in {request.method} {request.url.path}",
        errors=errors,
    )

    summary = '; '.join(f"{e['field']}: {e['message']}" if e['field'] else e['message'] for e in errors)
    return _error_response(request, 400, summary or 'Validation error', errors=errors)
