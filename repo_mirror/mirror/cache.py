"""
Mirror Cache: keep one fresh bare mirror per source repository.

Per repository the cache moves through two states:

    NotCloned --clone--> Cloned
    Cloned --fetch ok--> Cloned (fresh)
    Cloned --fetch failed--> delete --> NotCloned --clone (once)--> Cloned

A mirror whose fetch failed is never handed back for pushing; it is
deleted and recloned, and a failed reclone is raised to the caller.

## Usage

    from repo_mirror.mirror.cache import MirrorCache

    cache = MirrorCache(Path("./repos-backup"), "octo", token)
    path = cache.path_for("reef")
    cache.ensure_mirror("reef", "https://github.com/octo/reef.git", path)
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..errors import GitOperationError
from . import git

logger = logging.getLogger(__name__)


class MirrorCache:
    """Bare mirror clones under a flat backup directory."""

    def __init__(self, backup_dir: Path, source_user: str, source_token: str):
        self.backup_dir = backup_dir
        self._source_user = source_user
        self._source_token = source_token

    def path_for(self, name: str) -> Path:
        """Local mirror path for a repository: `<backup_dir>/<name>.git`."""
        return self.backup_dir / f"{name}.git"

    def ensure_mirror(self, name: str, clone_url: str, local_path: Path) -> None:
        """
        Make `local_path` a freshly fetched mirror of `clone_url`.

        Raises GitOperationError if the mirror cannot be brought up to date.
        """
        auth_url = git.authenticated_url(clone_url, self._source_user, self._source_token)

        if not local_path.exists():
            logger.info(f"[mirror] Cloning (mirror) {name}")
            git.clone_mirror(auth_url, local_path)
            return

        try:
            git.fetch_all(local_path)
            return
        except GitOperationError as e:
            logger.warning(f"[mirror] Fetch failed for {name}, recloning: {e}")

        shutil.rmtree(local_path, ignore_errors=True)
        if local_path.exists():
            raise GitOperationError(f"Could not remove stale mirror {local_path}")
        git.clone_mirror(auth_url, local_path)
