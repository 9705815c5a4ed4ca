"""
Provider Registry: look up destination providers by name.

Exactly one destination is active per run; the CLI selects it by name and
the registry builds it from the loaded config.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

from ..config.loader import MirrorConfig
from ..errors import ConfigurationError
from .base import Provider
from .bitbucket import BitbucketProvider
from .codeberg import CodebergProvider
from .gitlab import GitLabProvider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[MirrorConfig], Provider]


class ProviderRegistry:
    """Registry of destination provider factories."""

    def __init__(self):
        self.factories: Dict[str, ProviderFactory] = {}
        self._register_builtin()

    def _register_builtin(self) -> None:
        self.register(
            "gitlab",
            lambda config: GitLabProvider(config.gitlab, timeout=config.http_timeout),
        )
        self.register(
            "codeberg",
            lambda config: CodebergProvider(config.codeberg, timeout=config.http_timeout),
        )
        self.register(
            "bitbucket",
            lambda config: BitbucketProvider(config.bitbucket, timeout=config.http_timeout),
        )

    def register(self, name: str, factory: ProviderFactory) -> None:
        self.factories[name] = factory
        logger.debug(f"Registered provider: {name}")

    def names(self) -> List[str]:
        return sorted(self.factories)

    def build(self, name: str, config: MirrorConfig) -> Provider:
        """Build the named provider, or raise ConfigurationError."""
        factory = self.factories.get(name)
        if factory is None:
            raise ConfigurationError(
                f"Unknown provider '{name}' (expected one of: {', '.join(self.names())})"
            )
        return factory(config)


PROVIDER_NAMES = ProviderRegistry().names()
