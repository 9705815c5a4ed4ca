"""
Config Loader: build one MirrorConfig from environment variables.

The config is loaded once at startup and passed explicitly to every
component. Nothing inside the engine reads the environment itself.

## Environment Variables

Source (GitHub):
    GITHUB_USER, GITHUB_TOKEN

Destinations:
    GITLAB_USER, GITLAB_TOKEN, GITLAB_GROUP (optional)
    CODEBERG_USER, CODEBERG_TOKEN
    BITBUCKET_EMAIL, BITBUCKET_API_TOKEN, BITBUCKET_WORKSPACE

Run settings:
    REPO_VISIBILITY       auto | public | private (default: auto)
    BACKUP_DIR            local mirror cache (default: ./repos-backup)
    LOGS_DIR              run log files (default: ./logs)
    GITHUB_PER_PAGE       page size for listing (default: 100)
    GITHUB_PAGE_DELAY_MS  pause between pages (default: 500)
    HTTP_TIMEOUT_SECONDS  API request timeout (default: 30)

## Usage

    from repo_mirror.config import MirrorConfig

    config = MirrorConfig.from_env()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from ..errors import ConfigurationError
from ..models import VisibilityPolicy

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_DIR = "./repos-backup"
DEFAULT_LOGS_DIR = "./logs"
DEFAULT_PER_PAGE = 100
DEFAULT_PAGE_DELAY_MS = 500
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass
class GitHubCredentials:
    user: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)

    def is_complete(self) -> bool:
        return bool(self.user and self.token)


@dataclass
class GitLabCredentials:
    user: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)
    group: Optional[str] = None

    def is_complete(self) -> bool:
        return bool(self.user and self.token)

    @property
    def namespace(self) -> Optional[str]:
        """Group path when configured, the user's namespace otherwise."""
        return self.group or self.user


@dataclass
class CodebergCredentials:
    user: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)

    def is_complete(self) -> bool:
        return bool(self.user and self.token)


@dataclass
class BitbucketCredentials:
    email: Optional[str] = None
    api_token: Optional[str] = field(default=None, repr=False)
    workspace: Optional[str] = None

    def is_complete(self) -> bool:
        return bool(self.email and self.api_token and self.workspace)


@dataclass
class MirrorConfig:
    """Everything a mirror run needs, resolved once."""

    github: GitHubCredentials = field(default_factory=GitHubCredentials)
    gitlab: GitLabCredentials = field(default_factory=GitLabCredentials)
    codeberg: CodebergCredentials = field(default_factory=CodebergCredentials)
    bitbucket: BitbucketCredentials = field(default_factory=BitbucketCredentials)

    visibility_policy: VisibilityPolicy = VisibilityPolicy.AUTO
    backup_dir: Path = field(default_factory=lambda: Path(DEFAULT_BACKUP_DIR))
    logs_dir: Path = field(default_factory=lambda: Path(DEFAULT_LOGS_DIR))
    per_page: int = DEFAULT_PER_PAGE
    page_delay: float = DEFAULT_PAGE_DELAY_MS / 1000
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MirrorConfig":
        """Parse configuration from environment variables."""
        env = os.environ if environ is None else environ

        def get(key: str) -> Optional[str]:
            value = env.get(key, "").strip()
            return value or None

        config = cls(
            github=GitHubCredentials(
                user=get("GITHUB_USER"),
                token=get("GITHUB_TOKEN"),
            ),
            gitlab=GitLabCredentials(
                user=get("GITLAB_USER"),
                token=get("GITLAB_TOKEN"),
                group=get("GITLAB_GROUP"),
            ),
            codeberg=CodebergCredentials(
                user=get("CODEBERG_USER"),
                token=get("CODEBERG_TOKEN"),
            ),
            bitbucket=BitbucketCredentials(
                email=get("BITBUCKET_EMAIL"),
                api_token=get("BITBUCKET_API_TOKEN"),
                workspace=get("BITBUCKET_WORKSPACE"),
            ),
            visibility_policy=_parse_policy(get("REPO_VISIBILITY")),
            backup_dir=Path(get("BACKUP_DIR") or DEFAULT_BACKUP_DIR),
            logs_dir=Path(get("LOGS_DIR") or DEFAULT_LOGS_DIR),
            per_page=_parse_int("GITHUB_PER_PAGE", get("GITHUB_PER_PAGE"), DEFAULT_PER_PAGE),
            page_delay=_parse_int(
                "GITHUB_PAGE_DELAY_MS", get("GITHUB_PAGE_DELAY_MS"), DEFAULT_PAGE_DELAY_MS
            ) / 1000,
            http_timeout=float(
                _parse_int("HTTP_TIMEOUT_SECONDS", get("HTTP_TIMEOUT_SECONDS"), int(DEFAULT_HTTP_TIMEOUT))
            ),
        )

        if config.per_page < 1 or config.per_page > 100:
            raise ConfigurationError(
                f"GITHUB_PER_PAGE must be between 1 and 100, got {config.per_page}"
            )

        logger.debug(
            f"Loaded config: visibility={config.visibility_policy.value}, "
            f"backup_dir={config.backup_dir}, per_page={config.per_page}"
        )
        return config


def _parse_policy(value: Optional[str]) -> VisibilityPolicy:
    if value is None:
        return VisibilityPolicy.AUTO
    try:
        return VisibilityPolicy(value.lower())
    except ValueError:
        allowed = ", ".join(p.value for p in VisibilityPolicy)
        raise ConfigurationError(f"REPO_VISIBILITY must be one of {allowed}, got '{value}'")


def _parse_int(key: str, value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got '{value}'")
    if parsed < 0:
        raise ConfigurationError(f"{key} must not be negative, got {parsed}")
    return parsed
