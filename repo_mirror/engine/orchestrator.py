"""
Sync Orchestrator: mirror every source repository to one destination.

For each repository, strictly one after another:

1. compute the desired visibility
2. refresh the local mirror (clone, fetch, or reclone)
3. look up the destination, reconcile, and apply the action
4. `git push --mirror` to the destination

A failure in any step is logged with the repository and phase, and the
loop moves on to the next repository. Only setup failures (provider
preparation, backup directory) abort the run.

## Usage

    orchestrator = SyncOrchestrator(cache, VisibilityPolicy.AUTO)
    result = orchestrator.run(provider, repositories)
    print(f"{result.succeeded}/{result.total}")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..errors import FatalSetupError, GitOperationError, ProviderAPIError
from ..mirror import git
from ..mirror.cache import MirrorCache
from ..models import SourceRepository, VisibilityPolicy, desired_visibility
from ..providers.base import Provider
from .reconcile import Action, Create, NoOp, UpdateVisibility, reconcile

logger = logging.getLogger(__name__)

PHASE_MIRROR = "mirror"
PHASE_RECONCILE = "reconcile"
PHASE_PUSH = "push"


@dataclass
class RepoFailure:
    """Why one repository was skipped."""

    name: str
    phase: str
    error: str


@dataclass
class SyncResult:
    """Outcome of one run."""

    succeeded: int = 0
    total: int = 0
    failures: List[RepoFailure] = field(default_factory=list)
    actions: Dict[str, Action] = field(default_factory=dict)

    @property
    def skipped(self) -> int:
        return len(self.failures)


class SyncOrchestrator:
    """Drives list -> mirror -> reconcile -> push for one destination."""

    def __init__(self, cache: MirrorCache, visibility_policy: VisibilityPolicy):
        self.cache = cache
        self.visibility_policy = visibility_policy

    def run(self, provider: Provider, repositories: Sequence[SourceRepository]) -> SyncResult:
        """
        Mirror `repositories` to `provider`.

        Raises FatalSetupError only for setup failures; per-repository
        failures are recorded in the result.
        """
        result = SyncResult(total=len(repositories))
        self._setup(provider)

        if not repositories:
            logger.info("No repositories to mirror")
            return result

        for repo in repositories:
            if self._sync_one(provider, repo, result):
                result.succeeded += 1
                logger.info(f"Synced {repo.name}")
                logger.info(f"Repos done: {result.succeeded}/{result.total}")

        logger.info(
            f"[{provider.name}] Run complete: {result.succeeded}/{result.total} synced, "
            f"{result.skipped} skipped"
        )
        return result

    def _setup(self, provider: Provider) -> None:
        try:
            provider.prepare()
        except ProviderAPIError as e:
            raise FatalSetupError(f"Could not prepare {provider.name}: {e}")

        try:
            self.cache.backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FatalSetupError(f"Could not create backup directory {self.cache.backup_dir}: {e}")

    def _sync_one(self, provider: Provider, repo: SourceRepository, result: SyncResult) -> bool:
        desired = desired_visibility(repo, self.visibility_policy)
        local_path = self.cache.path_for(repo.name)
        log_extra = {"repo": repo.name}

        logger.info(f"Syncing {repo.name} (desired visibility: {desired.value})", extra=log_extra)

        phase = PHASE_MIRROR
        try:
            self.cache.ensure_mirror(repo.name, repo.clone_url, local_path)

            phase = PHASE_RECONCILE
            state = provider.lookup(repo.name)
            action = reconcile(state, desired)
            self._apply(provider, repo.name, state, action)
            result.actions[repo.name] = action

            phase = PHASE_PUSH
            logger.info(
                f"Pushing {repo.name} -> {provider.name} ({provider.display_target(repo.name)})",
                extra=log_extra,
            )
            git.push_mirror(local_path, provider.push_target_url(repo.name))
        except (GitOperationError, ProviderAPIError) as e:
            logger.error(
                f"Failed to {phase} {repo.name}: {e}",
                extra={"repo": repo.name, "phase": phase},
            )
            result.failures.append(RepoFailure(name=repo.name, phase=phase, error=str(e)))
            return False

        return True

    def _apply(self, provider: Provider, name: str, state, action: Action) -> None:
        target = provider.display_target(name)
        if isinstance(action, NoOp):
            logger.info(
                f"[{provider.name}] {target} exists with matching visibility "
                f"'{state.visibility.value}'"
            )
        elif isinstance(action, Create):
            logger.info(f"[{provider.name}] {target} not found, creating ({action.visibility.value})")
            provider.create(name, action.visibility)
        elif isinstance(action, UpdateVisibility):
            logger.info(
                f"[{provider.name}] {target} is '{state.visibility.value}' but desired is "
                f"'{action.visibility.value}', updating"
            )
            provider.update_visibility(state.provider_id, action.visibility)


def select_repositories(
    repositories: Sequence[SourceRepository],
    only: str | None = None,
) -> List[SourceRepository]:
    """
    Restrict the run to a single named repository (test/debug mode).

    Raises FatalSetupError if the name is not in the source listing.
    """
    if only is None:
        return list(repositories)
    selected = [repo for repo in repositories if repo.name == only]
    if not selected:
        raise FatalSetupError(f"Repository '{only}' not found in the source listing")
    logger.info(f"Restricting run to repository '{only}'")
    return selected
