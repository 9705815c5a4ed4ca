"""
Bitbucket Provider: repositories in a Bitbucket Cloud workspace.

Auth: HTTP Basic with the Atlassian account email and an API token on REST
calls. Git pushes use the fixed username `x-bitbucket-api-token-auth`
with the same API token as password.

Bitbucket addresses repositories by slug; slugs are lowercase, so the
source name is lowercased for every call and for the push URL.

Docs:
    Repositories: https://developer.atlassian.com/cloud/bitbucket/rest/api-group-repositories/
    API tokens:   https://support.atlassian.com/bitbucket-cloud/docs/using-api-tokens/
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..config.loader import BitbucketCredentials
from ..errors import ProviderAPIError
from ..http_logging import build_client
from ..mirror.git import authenticated_url
from ..models import Absent, DestinationState, Present, Visibility
from .base import HTTP_NOT_FOUND, Provider

logger = logging.getLogger(__name__)

API_BASE = "https://api.bitbucket.org/2.0"
GIT_HOST = "https://bitbucket.org"
PUSH_USERNAME = "x-bitbucket-api-token-auth"


def repo_slug(name: str) -> str:
    return name.lower()


class BitbucketProvider(Provider):

    def __init__(
        self,
        credentials: BitbucketCredentials,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        client = build_client(
            API_BASE,
            auth=httpx.BasicAuth(credentials.email or "", credentials.api_token or ""),
            timeout=timeout,
            transport=transport,
        )
        super().__init__(client)
        self.credentials = credentials

    @property
    def name(self) -> str:
        return "bitbucket"

    @property
    def workspace(self) -> str:
        return self.credentials.workspace or ""

    def lookup(self, name: str) -> DestinationState:
        resp = self._request("GET", self._repo_path(name), allow_status=(HTTP_NOT_FOUND,))
        if resp.status_code == HTTP_NOT_FOUND:
            return Absent()
        return self._to_state(self._json(resp), name)

    def create(self, name: str, visibility: Visibility) -> Present:
        payload = {"scm": "git", "is_private": visibility.is_private}
        resp = self._request("POST", self._repo_path(name), json=payload)
        logger.info(f"[bitbucket] Created repo {self.display_target(name)} ({visibility.value})")
        return self._to_state(self._json(resp), name)

    def update_visibility(self, provider_id: str, visibility: Visibility) -> None:
        # provider_id is workspace/slug
        self._request(
            "PUT",
            f"/repositories/{provider_id}",
            json={"is_private": visibility.is_private},
        )
        logger.info(f"[bitbucket] Updated repo {provider_id} visibility -> {visibility.value}")

    def push_target_url(self, name: str) -> str:
        url = f"{GIT_HOST}/{self.workspace}/{repo_slug(name)}.git"
        return authenticated_url(url, PUSH_USERNAME, self.credentials.api_token or "")

    def display_target(self, name: str) -> str:
        return f"{self.workspace}/{repo_slug(name)}"

    def _repo_path(self, name: str) -> str:
        return f"/repositories/{self.workspace}/{repo_slug(name)}"

    def _to_state(self, data: dict, name: str) -> Present:
        if "is_private" not in data:
            raise ProviderAPIError(self.name, "Unexpected repository payload: missing 'is_private'")
        return Present(
            visibility=Visibility.from_private(bool(data["is_private"])),
            provider_id=f"{self.workspace}/{data.get('slug') or repo_slug(name)}",
        )
