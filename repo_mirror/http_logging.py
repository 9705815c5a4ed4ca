"""
HTTP Logging: request/response diagnostics attached at the client layer.

Providers and the source lister build their httpx.Client through
`build_client`, which installs event hooks that log each request body and
each response status and body at DEBUG. The response hook reads the body
into memory first, so callers can still call `.json()` or `.text`.
Authorization headers are never logged.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "repo-mirror/1.0"
MAX_LOGGED_BODY = 4000


def _clip(text: str) -> str:
    if len(text) > MAX_LOGGED_BODY:
        return text[:MAX_LOGGED_BODY] + f"... ({len(text)} chars)"
    return text


def log_request(request: httpx.Request) -> None:
    body = request.content.decode("utf-8", errors="replace") if request.content else ""
    if body:
        logger.debug(f"-> {request.method} {request.url}\n{_clip(body)}")
    else:
        logger.debug(f"-> {request.method} {request.url} <empty>")


def log_response(response: httpx.Response) -> None:
    response.read()
    request = response.request
    body = response.text
    if body:
        logger.debug(
            f"<- {request.method} {request.url} -> {response.status_code}\n{_clip(body)}"
        )
    else:
        logger.debug(f"<- {request.method} {request.url} -> {response.status_code} <empty>")


def build_client(
    base_url: str,
    headers: Optional[Dict[str, str]] = None,
    auth: Optional[Any] = None,
    timeout: float = 30.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Create an httpx.Client with request/response logging hooks."""
    merged_headers = {"User-Agent": USER_AGENT}
    merged_headers.update(headers or {})
    return httpx.Client(
        base_url=base_url,
        headers=merged_headers,
        auth=auth,
        timeout=timeout,
        transport=transport,
        event_hooks={"request": [log_request], "response": [log_response]},
    )
