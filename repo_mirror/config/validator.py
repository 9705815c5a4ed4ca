"""
Configuration Validator: check credentials before a run starts.

A sync needs the GitHub source credentials plus the credentials of the one
selected destination. The validator reports which environment variables
are present or missing and how to obtain them.

## Usage

    from repo_mirror.config import ConfigValidator

    validator = ConfigValidator()
    status = validator.validate_provider("gitlab")

    if not status.configured:
        print(f"Missing {status.missing}")
        print(f"  -> {status.guidance}")
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass
class ConfigStatus:
    """Status of a configuration check."""

    provider: str
    configured: bool
    missing: List[str] = field(default_factory=list)
    present: List[str] = field(default_factory=list)
    guidance: Optional[str] = None

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON output."""
        return {
            "provider": self.provider,
            "configured": self.configured,
            "missing": self.missing,
            "present": self.present,
            "guidance": self.guidance,
        }


SOURCE_PROVIDER = "github"

PROVIDER_REQUIREMENTS = {
    "github": {
        "required": ["GITHUB_USER", "GITHUB_TOKEN"],
        "optional": ["GITHUB_PER_PAGE", "GITHUB_PAGE_DELAY_MS"],
        "guidance": "Create a token with repo scope at https://github.com/settings/tokens",
    },
    "gitlab": {
        "required": ["GITLAB_USER", "GITLAB_TOKEN"],
        "optional": ["GITLAB_GROUP"],
        "guidance": "Create a token with api scope at https://gitlab.com/-/user_settings/personal_access_tokens",
    },
    "codeberg": {
        "required": ["CODEBERG_USER", "CODEBERG_TOKEN"],
        "optional": [],
        "guidance": "Create an access token at https://codeberg.org/user/settings/applications",
    },
    "bitbucket": {
        "required": ["BITBUCKET_EMAIL", "BITBUCKET_API_TOKEN", "BITBUCKET_WORKSPACE"],
        "optional": [],
        "guidance": "Create an API token with repository scopes at https://id.atlassian.com/manage-profile/security/api-tokens",
    },
}


class ConfigValidator:
    """
    Validate source and destination credentials.

    Checks environment variables and provides guidance for missing config.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.requirements = PROVIDER_REQUIREMENTS
        self.environ = os.environ if environ is None else environ

    def validate_provider(self, provider_name: str) -> ConfigStatus:
        """Check if a provider is properly configured."""
        if provider_name not in self.requirements:
            return ConfigStatus(
                provider=provider_name,
                configured=False,
                guidance=f"Unknown provider: {provider_name}",
            )

        reqs = self.requirements[provider_name]
        missing = []
        present = []

        for var in reqs["required"]:
            if self.environ.get(var, "").strip():
                present.append(var)
            else:
                missing.append(var)

        for var in reqs["optional"]:
            if self.environ.get(var, "").strip():
                present.append(var)

        return ConfigStatus(
            provider=provider_name,
            configured=not missing,
            missing=missing,
            present=present,
            guidance=reqs["guidance"] if missing else None,
        )

    def validate_all(self) -> Dict[str, ConfigStatus]:
        """Validate every known provider, source included."""
        return {name: self.validate_provider(name) for name in self.requirements}

    def validate_run(self, destination: str) -> List[ConfigStatus]:
        """
        Validate what a sync to `destination` needs.

        Returns only the statuses that are incomplete; an empty list means
        the run can start.
        """
        statuses = [
            self.validate_provider(SOURCE_PROVIDER),
            self.validate_provider(destination),
        ]
        incomplete = [s for s in statuses if not s.configured]
        for status in incomplete:
            logger.error(
                f"{status.provider}: not configured (missing: {', '.join(status.missing)})"
            )
        return incomplete
