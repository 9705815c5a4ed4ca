"""
Provider Base Class: the contract every destination host implements.

The orchestrator drives all destinations through these capabilities:

    lookup(name)                          -> Absent | Present
    create(name, visibility)              -> Present
    update_visibility(provider_id, vis)   -> None (safe to repeat)
    push_target_url(name)                 -> authenticated HTTPS URL (pure)

plus `prepare()`, a once-per-run setup hook (e.g. resolving a namespace).
Subclasses speak their own wire protocol through `_request`, which turns
transport failures and unexpected statuses into ProviderAPIError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

import httpx

from ..errors import ProviderAPIError
from ..models import DestinationState, Present, Visibility

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404


class Provider(ABC):
    """
    Abstract base class for destination hosts.

    Each provider owns one httpx.Client, built once at startup.
    """

    def __init__(self, client: httpx.Client):
        self._client = client

    @property
    @abstractmethod
    def name(self) -> str:
        """The provider identifier (e.g., 'gitlab')."""
        pass

    def prepare(self) -> None:
        """Run once before the first repository. Default: nothing to do."""
        pass

    @abstractmethod
    def lookup(self, name: str) -> DestinationState:
        """Return Absent on 404, Present otherwise; raise on other errors."""
        pass

    @abstractmethod
    def create(self, name: str, visibility: Visibility) -> Present:
        """Create the repository. Only called after lookup returned Absent."""
        pass

    @abstractmethod
    def update_visibility(self, provider_id: str, visibility: Visibility) -> None:
        """Set the repository visibility."""
        pass

    @abstractmethod
    def push_target_url(self, name: str) -> str:
        """Build the authenticated push URL. No network access."""
        pass

    @abstractmethod
    def display_target(self, name: str) -> str:
        """Credential-free `namespace/name` label for logs."""
        pass

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        allow_status: Iterable[int] = (),
    ) -> httpx.Response:
        """
        Send a request and check the response.

        Statuses listed in `allow_status` are returned to the caller as-is;
        any other non-2xx status raises ProviderAPIError with the body.
        """
        try:
            resp = self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise ProviderAPIError(self.name, f"{method} {path} failed: {e}")

        if resp.is_success or resp.status_code in allow_status:
            return resp

        logger.error(f"[{self.name}] API error {resp.status_code} on {method} {path}: {resp.text}")
        raise ProviderAPIError(
            self.name,
            f"{method} {path} returned an error",
            status_code=resp.status_code,
            body=resp.text,
        )

    def _json(self, resp: httpx.Response) -> dict:
        """Decode a response body that must be a JSON object."""
        try:
            data = resp.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise ProviderAPIError(
                self.name,
                f"Expected a JSON object in response to {resp.request.method} {resp.request.url.path}",
                status_code=resp.status_code,
                body=resp.text,
            )
        return data
