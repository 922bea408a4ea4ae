"""pushkarma CLI - pre-receive hook entrypoint and ACL tooling."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pushkarma import __version__
from pushkarma.git.exec import ExecError
from pushkarma.git.resolver import GitRangeDiff, repository_prefix
from pushkarma.hook.config import ConfigError, load_config
from pushkarma.hook.gate import run_gate
from pushkarma.hook.identity import resolve_username
from pushkarma.hook.verdict import Verdict, cannot_determine, misconfigured
from pushkarma.karma.evaluator import evaluate, explain
from pushkarma.karma.parser import (
    DirectiveSourceError,
    find_malformed_lines,
    load_directives,
    parse_directives,
    read_acl_lines,
)
from pushkarma.karma.types import Disposition

logger = logging.getLogger(__name__)

cli = typer.Typer(
    name="pushkarma",
    help="pushkarma - per-path push access control for git",
    no_args_is_help=True,
)
acl_app = typer.Typer(help="Inspect ACL files.", no_args_is_help=True)
cli.add_typer(acl_app, name="acl")
console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
        force=True,
    )


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show pushkarma version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Per-path push access control for git."""
    _ = version


def _emit(verdict: Verdict) -> NoReturn:
    if verdict.message:
        typer.echo(verdict.message, err=True)
    raise typer.Exit(verdict.exit_code)


@cli.command("pre-receive")
def pre_receive(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Hook config file (defaults to $PUSHKARMA_CONFIG or <git-dir>/pushkarma.yaml).",
    ),
    git_dir: Path | None = typer.Option(
        None,
        "--git-dir",
        help="Repository git directory (defaults to $GIT_DIR or the current directory).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
) -> None:
    """Gate a push: read ref updates from stdin, deny unless every path is available."""
    _configure_logging("DEBUG" if verbose else "WARNING")
    resolved_git_dir = (git_dir or Path(os.environ.get("GIT_DIR", "."))).resolve()

    try:
        config = load_config(resolved_git_dir, path=config_path, environ=os.environ)
        if not verbose:
            logging.getLogger().setLevel(config.log_level)
        directives = load_directives(config.acl_path)
    except (ConfigError, DirectiveSourceError) as exc:
        logger.error("%s", exc)
        _emit(misconfigured(str(exc)))

    username = resolve_username(os.environ, proxy_header=config.proxy_user_header)
    logger.debug("acting user: %s", username)
    try:
        verdict = run_gate(
            sys.stdin,
            username=username,
            prefix=repository_prefix(resolved_git_dir),
            directives=directives,
            range_diff=GitRangeDiff(resolved_git_dir),
        )
    except ExecError as exc:
        logger.error("%s", exc)
        verdict = cannot_determine(str(exc).splitlines()[0])
    _emit(verdict)


@cli.command("check")
def check(
    paths: list[str] = typer.Argument(..., metavar="PATH..."),
    acl: Path = typer.Option(..., "--acl", help="ACL file to evaluate."),
    user: str | None = typer.Option(None, "--user", "-u", help="Acting username (omit for an unknown user)."),
    repo: str | None = typer.Option(
        None,
        "--repo",
        help="Repository name prefixed to every PATH, e.g. myrepo.git.",
    ),
) -> None:
    """Evaluate an ACL offline and show which directive decides each path."""
    try:
        directives = parse_directives(read_acl_lines(acl))
    except DirectiveSourceError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc

    requested = [f"{repo.rstrip('/')}/{path}" if repo else path for path in paths]
    availability = evaluate(user, requested, directives)

    table = Table(title=f"karma for {user or '(unknown user)'}")
    table.add_column("Path")
    table.add_column("Disposition")
    table.add_column("Decided by")
    for path in requested:
        decided_by = explain(user, path, directives)
        source = f"line {decided_by.lineno}: {decided_by.render()}" if decided_by else "default"
        disposition = availability[path]
        style = "green" if disposition is Disposition.AVAIL else "red"
        table.add_row(path, f"[{style}]{disposition.value}[/{style}]", source)
    console.print(table)

    denied = [path for path in requested if availability[path] is Disposition.UNAVAIL]
    typer.echo(f"{len(denied)} of {len(requested)} path(s) unavailable")
    if denied:
        raise typer.Exit(1)


@acl_app.command("lint")
def lint(
    path: Path = typer.Argument(..., help="ACL file to check."),
) -> None:
    """Report ACL lines that will be skipped as malformed."""
    try:
        lines = read_acl_lines(path)
    except DirectiveSourceError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc

    malformed = find_malformed_lines(lines)
    for lineno, text in malformed:
        typer.echo(f"{path}:{lineno}: skipped: {text}")
    if malformed:
        raise typer.Exit(1)
    typer.echo(f"ok: {len(parse_directives(lines))} directive(s)")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
