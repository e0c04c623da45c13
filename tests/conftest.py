"""Shared pytest fixtures and test-run configuration."""

from __future__ import annotations

import os

import pytest

INTEGRATION_ENV_VAR = "RUN_INTEGRATION_TESTS"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add the option that enables live GitHub API tests."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked as integration (live GitHub API).",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly enabled."""
    if config.getoption("--run-integration") or os.getenv(INTEGRATION_ENV_VAR) == "1":
        return

    skip_marker = pytest.mark.skip(
        reason=(
            "Live GitHub tests are disabled by default. "
            f"Use --run-integration or set {INTEGRATION_ENV_VAR}=1."
        )
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_marker)


@pytest.fixture(autouse=True)
def _no_live_github_token(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep unit tests from picking up a real token from the shell."""
    if "integration" in request.keywords:
        return
    for name in ("GITHUB_TOKEN", "GH_TOKEN"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
