"""
HTTP client for the form backend.

Every call is a single round-trip with no retry. Failures are raised as
ApiError subclasses carrying the server's message when it sent one.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx
from pydantic import ValidationError

from dynaform.client.errors import ApiError, ConflictError, NotFoundError, TransportError
from dynaform.client.schemas import Answer, FieldDefinition, parse_fields
from dynaform.client.settings import client_settings
from dynaform.client.transformer import transform_answers

logger = logging.getLogger(__name__)

FETCH_CONFIG_FAILED = "Failed to fetch form configuration"
SUBMIT_FAILED = "Failed to submit form data"


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


def _raise_for_status(response: httpx.Response, fallback: str) -> None:
    if response.is_success:
        return
    message = _error_message(response, fallback)
    logger.warning("API %s %s failed: %s %s", response.request.method, response.request.url, response.status_code, message)
    if response.status_code == 409:
        raise ConflictError(message, response.status_code)
    if response.status_code == 404:
        raise NotFoundError(message, response.status_code)
    raise ApiError(message, response.status_code)


class FormApiClient:
    """Async client for the config and submission endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or client_settings.API_BASE_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else client_settings.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "FormApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, fallback: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            logger.error("API %s %s unreachable: %s", method, path, exc)
            raise TransportError(fallback) from exc

        _raise_for_status(response, fallback)
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(fallback, response.status_code) from exc

    async def get_form_config(self) -> List[FieldDefinition]:
        body = await self._request("GET", "/form-fields/config", FETCH_CONFIG_FAILED)
        if not isinstance(body, dict) or not isinstance(body.get("data"), list):
            raise TransportError(FETCH_CONFIG_FAILED, payload=body)
        try:
            fields = parse_fields(body["data"])
        except ValidationError as exc:
            logger.error("Form configuration has malformed fields: %s", exc)
            raise TransportError(FETCH_CONFIG_FAILED, payload=body) from exc
        logger.debug("Fetched %d form fields", len(fields))
        return fields

    async def submit_form_data(self, answers: Mapping[str, Optional[Answer]]) -> Dict[str, Any]:
        payload = transform_answers(answers)
        logger.debug("Submitting form payload: %s", payload)
        return await self._request("POST", "/users", SUBMIT_FAILED, json=payload)
