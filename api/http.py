"""
HTTP Plumbing
=============

Shared pieces of the REST clients: the async httpx session, query-string
building and response parsing.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from config import get_settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def build_query(params: Dict[str, Any]) -> Dict[str, str]:
    """
    Drops None, empty strings and empty lists. Lists are comma-joined and
    booleans are sent as "true"/"false".
    """
    query = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            query[key] = ",".join(str(v) for v in value)
        elif isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


def _safe_json(response: httpx.Response):
    if response.status_code == 204 or not response.content:
        return None
    return response.json()


def parse_response(response: httpx.Response, default_message: Optional[str] = None):
    """Returns the decoded body, or raises ApiError carrying the backend's message."""
    if not response.is_success:
        try:
            payload = _safe_json(response) or {}
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        message = (payload.get("error") or payload.get("message")
                   or default_message or response.reason_phrase)
        raise ApiError(message, response.status_code)
    return _safe_json(response)


class BaseClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            follow_redirects=True,
            timeout=timeout if timeout is not None else settings.api_timeout,
            transport=transport,
        )

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None,
                   default_message: Optional[str] = None):
        response = await self.client.get(url, params=build_query(params or {}))
        return parse_response(response, default_message)

    async def _post(self, url: str, body: Dict[str, Any], default_message: Optional[str] = None):
        response = await self.client.post(url, json=body)
        return parse_response(response, default_message)

    async def close(self):
        """Closes the async client session."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
