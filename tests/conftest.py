"""Pytest configuration and fixtures for pushkarma tests."""
from pathlib import Path

import pytest


@pytest.fixture
def acl_file(tmp_path: Path):
    """Write ACL text to a temporary file and return its path."""

    def _write(text: str, name: str = "karma.acl") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


def pytest_sessionfinish(session, exitstatus):
    """Fail the run when --cov was requested but no coverage data was written."""
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    coverage_files = list(Path.cwd().glob(".coverage*"))
    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'pushkarma' (the package) not 'src/pushkarma' (filesystem path).",
            returncode=1
        )
