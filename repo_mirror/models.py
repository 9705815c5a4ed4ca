"""
Models: source repositories, visibility and destination state.

DestinationState is a tagged result: a lookup yields either Absent or
Present, so nothing downstream ever inspects raw HTTP status codes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Visibility(str, Enum):
    """Repository visibility as exposed by a hosting provider."""
    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"  # GitLab only, never desired

    @classmethod
    def from_private(cls, is_private: bool) -> "Visibility":
        return cls.PRIVATE if is_private else cls.PUBLIC

    @property
    def is_private(self) -> bool:
        return self is not Visibility.PUBLIC


class VisibilityPolicy(str, Enum):
    """How destination visibility is chosen for every repository."""
    AUTO = "auto"
    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class SourceRepository:
    """A repository listed on the source host."""

    name: str
    clone_url: str
    is_private: bool = False

    @classmethod
    def from_api(cls, data: dict) -> "SourceRepository":
        return cls(
            name=data["name"],
            clone_url=data["clone_url"],
            is_private=bool(data.get("private", False)),
        )


@dataclass(frozen=True)
class Absent:
    """The destination has no repository with this name."""
    pass


@dataclass(frozen=True)
class Present:
    """The destination has the repository with the given visibility."""

    visibility: Visibility
    provider_id: str


DestinationState = Union[Absent, Present]


def desired_visibility(repo: SourceRepository, policy: VisibilityPolicy) -> Visibility:
    """
    Compute the visibility a repository should have on the destination.

    With the auto policy the source's private flag is mirrored; otherwise
    the configured visibility applies to every repository.
    """
    if policy is VisibilityPolicy.AUTO:
        return Visibility.from_private(repo.is_private)
    return Visibility(policy.value)
