"""
Providers: destination hosts behind one common interface.
"""

from .base import Provider
from .bitbucket import BitbucketProvider
from .codeberg import CodebergProvider
from .gitlab import GitLabProvider
from .registry import PROVIDER_NAMES, ProviderRegistry

__all__ = [
    "Provider",
    "GitLabProvider",
    "CodebergProvider",
    "BitbucketProvider",
    "ProviderRegistry",
    "PROVIDER_NAMES",
]
