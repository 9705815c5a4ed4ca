"""
Reconciler: decide how to converge a destination onto the desired state.

    Absent                        -> Create(desired)
    Present(visibility == desired) -> NoOp
    Present(visibility != desired) -> UpdateVisibility(desired)

Pure and stateless: the result depends only on the two inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..models import Absent, DestinationState, Visibility


@dataclass(frozen=True)
class NoOp:
    pass


@dataclass(frozen=True)
class Create:
    visibility: Visibility


@dataclass(frozen=True)
class UpdateVisibility:
    visibility: Visibility


Action = Union[NoOp, Create, UpdateVisibility]


def reconcile(state: DestinationState, desired: Visibility) -> Action:
    if isinstance(state, Absent):
        return Create(desired)
    if state.visibility == desired:
        return NoOp()
    return UpdateVisibility(desired)
