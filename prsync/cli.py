"""Click-based CLI for prsync."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click

from prsync import __version__
from prsync.config import (
    ConfigError,
    PrsyncConfig,
    get_config_path,
    load_config,
    parse_mappings,
    resolve_source_repository,
    validate_config_file,
)
from prsync.config.schema import RepositoryRef
from prsync.github import GitHubClient
from prsync.logger import setup_logging
from prsync.output import Console, create_console
from prsync.sync import SyncEngine, SyncResult

EXIT_SYNC_FAILED = 1
EXIT_CONFIG = 2

TOKEN_ENVVARS = ["GITHUB_TOKEN", "INPUT_GITHUB-TOKEN"]
MAPPINGS_ENVVARS = ["PRSYNC_MAPPINGS", "INPUT_FILE-MAPPINGS"]


def _fail(console: Console, message: str, code: int = EXIT_CONFIG) -> NoReturn:
    console.print_error(message)
    sys.exit(code)


def _load_run_config(config_path: Optional[Path], mappings_json: Optional[str]) -> PrsyncConfig:
    """
    Build the run configuration from --mappings JSON or a config file.

    Inline JSON mappings replace the file's mappings; the file still
    supplies source repository, API URL and timeout when present.
    """
    path = config_path
    if path is None:
        default = get_config_path()
        path = default if default.exists() else None

    config = load_config(path) if path is not None else PrsyncConfig()

    if mappings_json:
        config = config.model_copy(update={"mappings": parse_mappings(mappings_json)})
    elif path is None:
        raise ConfigError("No file mappings given: pass --mappings or --config")

    return config


async def _run_sync(
    config: PrsyncConfig,
    source: RepositoryRef,
    token: str,
    api_url: Optional[str],
) -> SyncResult:
    async with GitHubClient(token, base_url=api_url or config.api_url, timeout=config.timeout) as client:
        engine = SyncEngine(client, source)
        return await engine.sync(config.mappings)


@click.group()
@click.version_option(version=__version__, prog_name="prsync")
def cli() -> None:
    """prsync - keep one file in sync across many repositories.

    Each mapping copies a file from the source repository to a sync branch
    in a destination repository and opens a pull request for it.

    \b
    Mappings come from --mappings (JSON) or a YAML config file:
      prsync.yaml in the current directory, or PRSYNC_CONFIG.
    """
    pass


@cli.command()
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Config file (YAML or JSON)")
@click.option("--mappings", "-m", "mappings_json", envvar=MAPPINGS_ENVVARS, help="File mappings as a JSON object")
@click.option("--token", envvar=TOKEN_ENVVARS, help="GitHub token (default: GITHUB_TOKEN)")
@click.option("--source-repo", "-s", help="Source repository owner/name (default: GITHUB_REPOSITORY)")
@click.option("--api-url", envvar="GITHUB_API_URL", help="GitHub REST API URL")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def sync(
    config_path: Optional[Path],
    mappings_json: Optional[str],
    token: Optional[str],
    source_repo: Optional[str],
    api_url: Optional[str],
    verbose: bool,
) -> None:
    """Synchronize every mapping and open pull requests.

    All mappings run concurrently. A failing mapping does not stop the
    others; the exit code is 1 when any mapping failed.

    \b
    Examples:
      prsync sync --config prsync.yaml
      prsync sync -m '{"license": {"sourcePath": ".", ...}}'
    """
    console = create_console(verbose=verbose)
    setup_logging(verbose=verbose)

    try:
        config = _load_run_config(config_path, mappings_json)
        source = resolve_source_repository(source_repo or config.source_repository)
    except (ConfigError, FileNotFoundError) as e:
        _fail(console, str(e))

    if not token:
        _fail(console, "GitHub token missing: set GITHUB_TOKEN or pass --token")

    if not config.mappings:
        console.print_warning("No file mappings defined, nothing to do")
        return

    console.print_info(f"Syncing {len(config.mappings)} mapping(s) from {source.full_name}")

    result = asyncio.run(_run_sync(config, source, token, api_url))
    console.print_sync_result(result)

    if not result.success:
        sys.exit(EXIT_SYNC_FAILED)


@cli.command()
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Config file (YAML or JSON)")
@click.option("--mappings", "-m", "mappings_json", envvar=MAPPINGS_ENVVARS, help="File mappings as a JSON object")
@click.option("--source-repo", "-s", help="Source repository owner/name (default: GITHUB_REPOSITORY)")
def plan(config_path: Optional[Path], mappings_json: Optional[str], source_repo: Optional[str]) -> None:
    """Show source files, destinations and sync branches without contacting GitHub."""
    console = create_console()

    try:
        config = _load_run_config(config_path, mappings_json)
    except (ConfigError, FileNotFoundError) as e:
        _fail(console, str(e))

    source: Optional[RepositoryRef] = None
    try:
        source = resolve_source_repository(source_repo or config.source_repository)
    except ConfigError:
        pass

    console.print_plan(config.mappings, source)


@cli.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--mappings", "-m", "mappings_json", help="Validate a JSON mappings object instead of a file")
def validate(path: Optional[Path], mappings_json: Optional[str]) -> None:
    """Validate a config file or a JSON mappings object.

    PATH defaults to prsync.yaml (or PRSYNC_CONFIG).
    """
    console = create_console()

    if mappings_json is not None:
        try:
            mappings = parse_mappings(mappings_json)
        except ConfigError as e:
            _fail(console, str(e))
        if not mappings:
            _fail(console, "No file mappings defined")
        console.print_success(f"{len(mappings)} mapping(s) valid")
        return

    is_valid, errors = validate_config_file(path)
    if not is_valid:
        for error in errors:
            console.print_error(error)
        sys.exit(EXIT_CONFIG)

    config = load_config(path)
    console.print_success(f"Configuration valid: {len(config.mappings)} mapping(s)")
