"""CLI contract tests for the pushkarma hook and ACL tools."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from pushkarma import __version__
from pushkarma.cli import cli
from pushkarma.git.exec import ExecError, ExecResult

OLD = "a" * 40
NEW = "b" * 40
PUSH = f"{OLD} {NEW} refs/heads/main\n"

_IDENTITY_KEYS = (
    "HTTP_X_REMOTE_USER",
    "HTTP_AUTHORIZATION",
    "GATEWAY_INTERFACE",
    "REMOTE_USER",
    "GL_USER",
    "PUSHKARMA_CONFIG",
    "PUSHKARMA_ACL",
)


class _GitLogStub:
    def __init__(self, stdout: str = "", code: int = 0):
        self.stdout = stdout
        self.code = code

    def __call__(self, args: list[str], *, repo_root: Path) -> ExecResult:
        result = ExecResult(
            argv=tuple(["git", *args]),
            cwd=repo_root,
            returncode=self.code,
            stdout=self.stdout,
            stderr="fatal: bad object" if self.code else "",
        )
        if self.code:
            raise ExecError(result)
        return result


@pytest.fixture
def repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in _IDENTITY_KEYS:
        monkeypatch.delenv(key, raising=False)
    git_dir = tmp_path / "repo.git"
    git_dir.mkdir()
    return git_dir


def _invoke(git_dir: Path, stdin: str):
    return CliRunner().invoke(cli, ["pre-receive", "--git-dir", str(git_dir)], input=stdin)


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_pre_receive_accepts_available_paths(repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (repo / "karma.acl").write_text("# committers\navail|alice|src/\n", encoding="utf-8")
    monkeypatch.setenv("REMOTE_USER", "alice")
    monkeypatch.setattr("pushkarma.git.resolver.run_git", _GitLogStub("src/a.c\0\n\0src/b.c\0"))

    result = _invoke(repo, PUSH)

    assert result.exit_code == 0, result.output


def test_pre_receive_denies_and_lists_paths(repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (repo / "karma.acl").write_text("avail||\nunavail|bob|secrets/\n", encoding="utf-8")
    monkeypatch.setenv("REMOTE_USER", "bob")
    monkeypatch.setattr("pushkarma.git.resolver.run_git", _GitLogStub("secrets/key\0readme\0"))

    result = _invoke(repo, PUSH)

    assert result.exit_code == 1
    assert "bob does not have commit access to:" in result.output
    assert "    repo.git/secrets/key" in result.output
    assert "repo.git/readme" not in result.output


def test_pre_receive_without_ref_updates_cannot_determine(repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (repo / "karma.acl").write_text("avail||\n", encoding="utf-8")
    monkeypatch.setattr("pushkarma.git.resolver.run_git", _GitLogStub("src/a.c\0"))

    result = _invoke(repo, "")

    assert result.exit_code == 2
    assert "cannot determine what was committed" in result.output


def test_pre_receive_git_failure_cannot_determine(repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (repo / "karma.acl").write_text("avail||\n", encoding="utf-8")
    monkeypatch.setattr("pushkarma.git.resolver.run_git", _GitLogStub(code=128))

    result = _invoke(repo, PUSH)

    assert result.exit_code == 2
    assert "cannot determine what was committed" in result.output


def test_pre_receive_missing_acl_denies(repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("pushkarma.git.resolver.run_git", _GitLogStub("src/a.c\0"))

    result = _invoke(repo, PUSH)

    assert result.exit_code == 3
    assert "misconfigured" in result.output


def test_pre_receive_uses_configured_acl_and_proxy_header(repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    acl_dir = repo.parent / "acl"
    acl_dir.mkdir()
    (acl_dir / "shared.acl").write_text("avail|carol|repo.git/docs/\n", encoding="utf-8")
    (repo / "pushkarma.yaml").write_text(
        "acl_path: ../acl/shared.acl\nproxy_user_header: HTTP_X_FORWARDED_USER\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("HTTP_X_FORWARDED_USER", "carol")
    monkeypatch.setattr("pushkarma.git.resolver.run_git", _GitLogStub("docs/guide.md\0"))

    result = _invoke(repo, PUSH)

    assert result.exit_code == 0, result.output


def test_check_reports_dispositions(acl_file) -> None:
    path = acl_file("avail|alice|src/\n")

    result = CliRunner().invoke(
        cli,
        ["check", "--acl", str(path), "--user", "alice", "--repo", "repo.git", "src/a.c", "docs/a.md"],
    )

    assert result.exit_code == 1
    assert "1 of 2 path(s) unavailable" in result.output


def test_check_all_available(acl_file) -> None:
    path = acl_file("avail||\n")
    result = CliRunner().invoke(cli, ["check", "--acl", str(path), "x/y"])
    assert result.exit_code == 0
    assert "0 of 1 path(s) unavailable" in result.output


def test_acl_lint_reports_malformed_lines(acl_file) -> None:
    path = acl_file("# ok\navail||\navail|alice\nbogus|a|b\n")

    result = CliRunner().invoke(cli, ["acl", "lint", str(path)])

    assert result.exit_code == 1
    assert f"{path}:3: skipped: avail|alice" in result.output
    assert f"{path}:4: skipped: bogus|a|b" in result.output


def test_acl_lint_clean_file(acl_file) -> None:
    path = acl_file("avail||\nunavail|bob|secrets/\n")
    result = CliRunner().invoke(cli, ["acl", "lint", str(path)])
    assert result.exit_code == 0
    assert "ok: 2 directive(s)" in result.output
