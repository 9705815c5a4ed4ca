"""
repo-mirror: CLI Entry Point

Usage:
    repo-mirror sync --provider gitlab [--repo NAME]
    repo-mirror list-repos [--json]
    repo-mirror check-config [--json]

Exit codes: 2 for an invalid provider or usage error, 1 for a fatal setup
error, 0 otherwise (even when some repositories were skipped).
"""

from __future__ import annotations

# Load .env before anything reads environment variables
from pathlib import Path
from dotenv import load_dotenv

_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

import json
import logging
from typing import Optional

import click

from .config import ConfigValidator, MirrorConfig
from .engine.orchestrator import SyncOrchestrator, select_repositories
from .errors import ConfigurationError, FatalSetupError, TransientAPIError
from .logging_config import setup_logging
from .mirror.cache import MirrorCache
from .providers import PROVIDER_NAMES, ProviderRegistry
from .source.github import GitHubSourceLister

logger = logging.getLogger(__name__)


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    raise SystemExit(1)


def _load_config() -> MirrorConfig:
    try:
        return MirrorConfig.from_env()
    except ConfigurationError as e:
        _fail(str(e))


def _make_lister(config: MirrorConfig) -> GitHubSourceLister:
    return GitHubSourceLister(
        config.github,
        per_page=config.per_page,
        page_delay=config.page_delay,
        timeout=config.http_timeout,
    )


@click.group()
def cli() -> None:
    """repo-mirror: mirror GitHub repositories to GitLab, Codeberg or Bitbucket."""
    setup_logging()


@cli.command()
@click.option(
    "--provider",
    required=True,
    type=click.Choice(PROVIDER_NAMES),
    help="Destination host to mirror to",
)
@click.option("--repo", "only_repo", default=None, help="Mirror only this repository")
def sync(provider: str, only_repo: Optional[str]) -> None:
    """Mirror every GitHub repository to one destination."""
    config = _load_config()
    log_file = setup_logging(logs_dir=config.logs_dir)
    logger.info(f"Starting sync to {provider} (log file: {log_file})")

    if ConfigValidator().validate_run(provider):
        _fail(f"Missing credentials for {provider}, run 'repo-mirror check-config'")

    lister = _make_lister(config)
    try:
        repositories = select_repositories(lister.list_repositories(), only_repo)
    except TransientAPIError as e:
        _fail(f"Cannot list source repositories: {e}")
    except FatalSetupError as e:
        _fail(str(e))
    finally:
        lister.close()

    destination = ProviderRegistry().build(provider, config)
    cache = MirrorCache(config.backup_dir, config.github.user or "", config.github.token or "")
    orchestrator = SyncOrchestrator(cache, config.visibility_policy)
    try:
        result = orchestrator.run(destination, repositories)
    except FatalSetupError as e:
        _fail(str(e))
    finally:
        destination.close()

    click.echo("")
    click.echo(f"  Provider:  {provider}")
    click.echo(f"  Synced:    {result.succeeded}/{result.total}")
    if result.failures:
        click.secho(f"  Skipped:   {result.skipped}", fg="yellow")
        for failure in result.failures:
            click.secho(f"    - {failure.name} ({failure.phase}): {failure.error}", fg="yellow")
        click.echo(f"  See {log_file} for details")
    else:
        click.secho("  All repositories synced", fg="green")


@cli.command("list-repos")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_repos(as_json: bool) -> None:
    """List the GitHub repositories that would be mirrored."""
    config = _load_config()
    if ConfigValidator().validate_run("github"):
        _fail("Missing GitHub credentials, run 'repo-mirror check-config'")

    lister = _make_lister(config)
    try:
        repositories = lister.list_repositories()
    except TransientAPIError as e:
        _fail(f"Cannot list source repositories: {e}")
    finally:
        lister.close()

    if as_json:
        click.echo(json.dumps(
            [{"name": r.name, "clone_url": r.clone_url, "private": r.is_private} for r in repositories],
            indent=2,
        ))
        return

    for repo in repositories:
        marker = "private" if repo.is_private else "public"
        click.echo(f"  {repo.name:40} {marker}")
    click.echo(f"\n  {len(repositories)} repositories")


@cli.command("check-config")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def check_config(as_json: bool) -> None:
    """Show which credentials are configured for each host."""
    results = ConfigValidator().validate_all()

    if as_json:
        click.echo(json.dumps({name: s.to_dict() for name, s in results.items()}, indent=2))
        return

    for name, status in results.items():
        if status.configured:
            click.secho(f"  ✓ {name}", fg="green")
        else:
            click.secho(f"  ✗ {name}: missing {', '.join(status.missing)}", fg="red")
            if status.guidance:
                click.echo(f"      {status.guidance}")


if __name__ == "__main__":
    cli()
