"""
GitHub Source Lister: page through the authenticated user's repositories.

Uses the REST endpoint GET /user/repos with HTTP Basic auth (user + token)
and `affiliation=owner,member`. Pages are fetched one after another from
page 1 until the first empty page, with a fixed pause after every non-empty
page to stay clear of rate limits.

A failure on the first page means nothing can be mirrored and raises
TransientAPIError. A failure on any later page ends pagination and the
repositories collected so far are returned.

Docs: https://docs.github.com/en/rest/repos/repos#list-repositories-for-the-authenticated-user
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

import httpx

from ..config.loader import GitHubCredentials
from ..errors import TransientAPIError
from ..http_logging import build_client
from ..models import SourceRepository

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"


class GitHubSourceLister:
    """Lists every repository the GitHub user owns or is a member of."""

    def __init__(
        self,
        credentials: GitHubCredentials,
        per_page: int = 100,
        page_delay: float = 0.5,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.per_page = per_page
        self.page_delay = page_delay
        self._sleep = sleep
        self._client = build_client(
            API_BASE,
            headers={"Accept": "application/vnd.github.v3+json"},
            auth=httpx.BasicAuth(credentials.user or "", credentials.token or ""),
            timeout=timeout,
            transport=transport,
        )

    def list_repositories(self) -> List[SourceRepository]:
        repos: List[SourceRepository] = []
        page = 1

        while True:
            batch = self._fetch_page(page)
            if batch is None:
                logger.warning(
                    f"[github] Listing stopped at page {page}; "
                    f"continuing with {len(repos)} repositories"
                )
                break
            if not batch:
                break

            repos.extend(SourceRepository.from_api(item) for item in batch)
            page += 1
            self._sleep(self.page_delay)

        logger.info(f"[github] Found {len(repos)} GitHub repos")
        for repo in repos:
            logger.info(f"[github] - {repo.name} (private: {repo.is_private})")
        return repos

    def _fetch_page(self, page: int) -> Optional[list]:
        """
        Fetch one page of repositories.

        Returns None when a later page fails; raises on the first page.
        """
        params = {
            "per_page": self.per_page,
            "page": page,
            "affiliation": "owner,member",
        }
        try:
            resp = self._client.get("/user/repos", params=params)
        except httpx.HTTPError as e:
            if page == 1:
                raise TransientAPIError(f"GitHub request failed: {e}")
            logger.error(f"[github] Request for page {page} failed: {e}")
            return None

        if not resp.is_success:
            logger.error(f"[github] GitHub API error {resp.status_code}: {resp.text}")
            if page == 1:
                raise TransientAPIError(
                    f"GitHub API error {resp.status_code} while listing repositories",
                    status_code=resp.status_code,
                    body=resp.text,
                )
            return None

        try:
            batch = resp.json()
        except ValueError:
            batch = None
        if not isinstance(batch, list) or not all(isinstance(item, dict) for item in batch):
            logger.error(f"[github] Page {page} is not a repository list: {resp.text[:200]}")
            if page == 1:
                raise TransientAPIError(
                    "GitHub returned an unexpected payload while listing repositories",
                    status_code=resp.status_code,
                    body=resp.text,
                )
            return None

        return batch

    def close(self) -> None:
        self._client.close()
