"""
Codeberg Provider: repositories owned by the Codeberg user (Forgejo API).

Auth: `Authorization: token <token>` on API calls; git pushes use
`<user>:<token>` as URL credentials.

Docs: https://codeberg.org/api/swagger
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..config.loader import CodebergCredentials
from ..errors import ProviderAPIError
from ..http_logging import build_client
from ..mirror.git import authenticated_url
from ..models import Absent, DestinationState, Present, Visibility
from .base import HTTP_NOT_FOUND, Provider

logger = logging.getLogger(__name__)

API_BASE = "https://codeberg.org/api/v1"
GIT_HOST = "https://codeberg.org"


class CodebergProvider(Provider):

    def __init__(
        self,
        credentials: CodebergCredentials,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        client = build_client(
            API_BASE,
            headers={"Authorization": f"token {credentials.token or ''}"},
            timeout=timeout,
            transport=transport,
        )
        super().__init__(client)
        self.credentials = credentials

    @property
    def name(self) -> str:
        return "codeberg"

    @property
    def owner(self) -> str:
        return self.credentials.user or ""

    def lookup(self, name: str) -> DestinationState:
        resp = self._request("GET", f"/repos/{self.owner}/{name}", allow_status=(HTTP_NOT_FOUND,))
        if resp.status_code == HTTP_NOT_FOUND:
            return Absent()
        return self._to_state(self._json(resp))

    def create(self, name: str, visibility: Visibility) -> Present:
        payload = {
            "name": name,
            "private": visibility.is_private,
            "auto_init": False,
        }
        resp = self._request("POST", "/user/repos", json=payload)
        logger.info(f"[codeberg] Created repo {self.display_target(name)} ({visibility.value})")
        return self._to_state(self._json(resp))

    def update_visibility(self, provider_id: str, visibility: Visibility) -> None:
        # provider_id is the repository full name: owner/name
        self._request("PATCH", f"/repos/{provider_id}", json={"private": visibility.is_private})
        logger.info(f"[codeberg] Updated repo {provider_id} visibility -> {visibility.value}")

    def push_target_url(self, name: str) -> str:
        url = f"{GIT_HOST}/{self.owner}/{name}.git"
        return authenticated_url(url, self.owner, self.credentials.token or "")

    def display_target(self, name: str) -> str:
        return f"{self.owner}/{name}"

    def _to_state(self, data: dict) -> Present:
        try:
            full_name = data.get("full_name") or f"{self.owner}/{data['name']}"
            return Present(
                visibility=Visibility.from_private(bool(data["private"])),
                provider_id=full_name,
            )
        except KeyError as e:
            raise ProviderAPIError(self.name, f"Unexpected repository payload: missing {e}")
