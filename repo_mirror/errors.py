"""
Errors: the failure taxonomy of a mirror run.

Setup failures (FatalSetupError, ConfigurationError) abort the whole run.
GitOperationError and ProviderAPIError are isolated to one repository and
caught by the orchestrator. TransientAPIError comes from the source listing
and only escalates when no repository could be listed at all.
"""

from __future__ import annotations

from typing import List, Optional


class MirrorError(Exception):
    """Base class for all repo-mirror errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(MirrorError):
    """Raised when configuration is missing or invalid."""
    pass


class FatalSetupError(MirrorError):
    """Raised when the run cannot start (no source listing, no namespace)."""
    pass


class GitOperationError(MirrorError):
    """Raised when a git subprocess exits non-zero."""

    def __init__(self, message: str, command: Optional[List[str]] = None, returncode: Optional[int] = None):
        self.command = command or []
        self.returncode = returncode
        super().__init__(message)


class ProviderAPIError(MirrorError):
    """Raised on any unexpected response from a destination API."""

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.provider = provider
        self.status_code = status_code
        self.body = body
        detail = f"{provider}: {message}"
        if status_code is not None:
            detail += f" (HTTP {status_code})"
        super().__init__(detail)


class TransientAPIError(MirrorError):
    """Raised when the source host API fails while listing repositories."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
