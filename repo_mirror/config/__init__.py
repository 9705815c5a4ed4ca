"""
Configuration: environment-driven settings and validation.
"""

from .loader import (
    BitbucketCredentials,
    CodebergCredentials,
    GitHubCredentials,
    GitLabCredentials,
    MirrorConfig,
)
from .validator import ConfigStatus, ConfigValidator

__all__ = [
    "MirrorConfig",
    "GitHubCredentials",
    "GitLabCredentials",
    "CodebergCredentials",
    "BitbucketCredentials",
    "ConfigStatus",
    "ConfigValidator",
]
