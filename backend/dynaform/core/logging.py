"""
Structured logging for the API.

Records carry the id of the request being served, the time spent on it so
far, and whatever context a logger was bound to (the entity a router works
on, for instance). Production renders one JSON object per line; other
environments render `message | key=value ...`.
"""
import json
import logging
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

from dynaform.core.config import settings

request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
request_start_var: ContextVar[Optional[float]] = ContextVar('request_start', default=None)


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


def begin_request(request_id: str) -> None:
    request_id_var.set(request_id)
    request_start_var.set(time.perf_counter())


def end_request() -> None:
    request_id_var.set(None)
    request_start_var.set(None)


def elapsed_ms() -> Optional[float]:
    """Milliseconds since the current request started, None outside a request."""
    start = request_start_var.get()
    if start is None:
        return None
    return round((time.perf_counter() - start) * 1000, 2)


class StructuredLogger:
    """
    Thin wrapper over a stdlib logger that renders keyword context.

    `bind()` returns a child logger whose context is added to every record,
    so routers log `field_logger.info("Created", field_id=1)` instead of
    repeating the entity in each call.
    """

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self.name = name
        self.logger = logging.getLogger(name)
        self.context = dict(context or {})

    def bind(self, **context) -> 'StructuredLogger':
        return StructuredLogger(self.name, {**self.context, **context})

    def _fields(self, extra: Dict[str, Any], error: Optional[BaseException]) -> Dict[str, Any]:
        fields = {**self.context, **extra}
        request_id = get_request_id()
        if request_id:
            fields['request_id'] = request_id
        duration = elapsed_ms()
        if duration is not None:
            fields.setdefault('duration_ms', duration)
        if error is not None:
            fields['error'] = f"{type(error).__name__}: {error}"
        return fields

    def render(self, message: str, fields: Dict[str, Any]) -> str:
        if settings.APP_ENV == 'production':
            return json.dumps({'logger': self.name, 'message': message, **fields}, default=str)
        if not fields:
            return message
        return f"{message} | " + ' '.join(f"{key}={value}" for key, value in fields.items())

    def log(self, level: int, message: str, error: Optional[BaseException] = None, **extra) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(level, self.render(message, self._fields(extra, error)))

    def debug(self, message: str, **extra) -> None:
        self.log(logging.DEBUG, message, **extra)

    def info(self, message: str, **extra) -> None:
        self.log(logging.INFO, message, **extra)

    def warning(self, message: str, **extra) -> None:
        self.log(logging.WARNING, message, **extra)

    def error(self, message: str, error: Optional[BaseException] = None, **extra) -> None:
        self.log(logging.ERROR, message, error=error, **extra)


api_logger = StructuredLogger('dynaform.api')
field_logger = api_logger.bind(entity='form_field')
submission_logger = api_logger.bind(entity='user')
db_logger = StructuredLogger('dynaform.database')
seed_logger = StructuredLogger('dynaform.seed')
