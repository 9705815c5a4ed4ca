"""
GitLab Provider: projects under a user or a group namespace.

Auth: `PRIVATE-TOKEN: <token>` header on every API call; git pushes use
`oauth2:<token>` as URL credentials.

Projects live under the configured group when GITLAB_GROUP is set, else
under the user's namespace. The group id is resolved once in `prepare()`
and reused for every project created during the run.

Docs:
    Projects API: https://docs.gitlab.com/ee/api/projects.html
    Groups API:   https://docs.gitlab.com/ee/api/groups.html
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from ..config.loader import GitLabCredentials
from ..errors import FatalSetupError, ProviderAPIError
from ..http_logging import build_client
from ..mirror.git import authenticated_url
from ..models import Absent, DestinationState, Present, Visibility
from .base import HTTP_NOT_FOUND, Provider

logger = logging.getLogger(__name__)

API_BASE = "https://gitlab.com/api/v4"
GIT_HOST = "https://gitlab.com"


class GitLabProvider(Provider):

    def __init__(
        self,
        credentials: GitLabCredentials,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        client = build_client(
            API_BASE,
            headers={"PRIVATE-TOKEN": credentials.token or ""},
            timeout=timeout,
            transport=transport,
        )
        super().__init__(client)
        self.credentials = credentials
        self.group_id: Optional[int] = None

    @property
    def name(self) -> str:
        return "gitlab"

    @property
    def namespace(self) -> str:
        return self.credentials.namespace or ""

    def prepare(self) -> None:
        """Resolve the group id once per run (no-op without a group)."""
        group = self.credentials.group
        if not group or self.group_id is not None:
            return

        try:
            resp = self._request("GET", f"/groups/{quote(group, safe='')}")
            self.group_id = int(self._json(resp)["id"])
        except (ProviderAPIError, KeyError, TypeError, ValueError) as e:
            raise FatalSetupError(f"Could not resolve GitLab group '{group}': {e}")

        logger.info(f"[gitlab] Using group '{group}' (id {self.group_id})")

    def lookup(self, name: str) -> DestinationState:
        project_path = quote(f"{self.namespace}/{name}", safe="")
        resp = self._request("GET", f"/projects/{project_path}", allow_status=(HTTP_NOT_FOUND,))
        if resp.status_code == HTTP_NOT_FOUND:
            return Absent()
        return self._to_state(self._json(resp))

    def create(self, name: str, visibility: Visibility) -> Present:
        payload = {
            "name": name,
            "path": name,
            "visibility": visibility.value,
            "initialize_with_readme": False,
        }
        if self.group_id is not None:
            payload["namespace_id"] = self.group_id

        resp = self._request("POST", "/projects", json=payload)
        logger.info(f"[gitlab] Created project {self.display_target(name)} ({visibility.value})")
        return self._to_state(self._json(resp))

    def update_visibility(self, provider_id: str, visibility: Visibility) -> None:
        self._request("PUT", f"/projects/{provider_id}", json={"visibility": visibility.value})
        logger.info(f"[gitlab] Updated project {provider_id} visibility -> {visibility.value}")

    def push_target_url(self, name: str) -> str:
        url = f"{GIT_HOST}/{self.namespace}/{name}.git"
        return authenticated_url(url, "oauth2", self.credentials.token or "")

    def display_target(self, name: str) -> str:
        return f"{self.namespace}/{name}"

    def _to_state(self, data: dict) -> Present:
        try:
            return Present(
                visibility=Visibility(data["visibility"]),
                provider_id=str(data["id"]),
            )
        except (KeyError, ValueError) as e:
            raise ProviderAPIError(self.name, f"Unexpected project payload: {e}")
