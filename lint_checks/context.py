"""Run context construction from the GitHub Actions environment."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from lint_checks.schema import ReportVerbosity, RunContext

DEFAULT_GITHUB_SERVER_URL = "https://github.com"
GITHUB_SERVER_URL_ENV_VAR = "GITHUB_SERVER_URL"
GITHUB_REPOSITORY_ENV_VAR = "GITHUB_REPOSITORY"
GITHUB_SHA_ENV_VAR = "GITHUB_SHA"
PR_URL_ENV_VAR = "LINT_REPORT_PR_URL"
ISSUE_SUMMARY_TYPE_ENV_VAR = "INPUT_ISSUESUMMARYTYPE"
REPORT_IGNORED_FILES_ENV_VAR = "INPUT_REPORTIGNOREDFILES"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})

logger = logging.getLogger(__name__)


class ContextConfigError(ValueError):
    """Raised when the environment does not describe a usable run context."""


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ContextConfigError(f"Missing required environment variable {name}.")
    return value


def parse_bool_flag(value: str, *, name: str) -> bool:
    """Parse a GitHub Actions style boolean input."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ContextConfigError(f"{name} must be 'true' or 'false', got '{value}'.")


def parse_report_verbosity(
    value: str, *, name: str = ISSUE_SUMMARY_TYPE_ENV_VAR
) -> ReportVerbosity:
    """Parse the issue summary type input."""
    try:
        return ReportVerbosity(value.strip().lower())
    except ValueError as error:
        allowed = "|".join(member.value for member in ReportVerbosity)
        raise ContextConfigError(f"{name} must be one of {allowed}, got '{value}'.") from error


def load_run_context(
    *,
    repo_html_url: str | None = None,
    sha: str | None = None,
    pr_html_url: str | None = None,
    issue_summary_type: str | None = None,
    report_ignored_files: bool | None = None,
) -> RunContext:
    """Build a run context, filling unset values from the environment."""
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    if repo_html_url is None:
        server_url = os.getenv(GITHUB_SERVER_URL_ENV_VAR) or DEFAULT_GITHUB_SERVER_URL
        repository = _require_env(GITHUB_REPOSITORY_ENV_VAR)
        repo_html_url = f"{server_url.rstrip('/')}/{repository}"
    if sha is None:
        sha = _require_env(GITHUB_SHA_ENV_VAR)
    if pr_html_url is None:
        pr_html_url = os.getenv(PR_URL_ENV_VAR) or None
    verbosity = parse_report_verbosity(
        issue_summary_type
        if issue_summary_type is not None
        else os.getenv(ISSUE_SUMMARY_TYPE_ENV_VAR, ReportVerbosity.FULL.value)
    )
    if report_ignored_files is None:
        report_ignored_files = parse_bool_flag(
            os.getenv(REPORT_IGNORED_FILES_ENV_VAR, "false"),
            name=REPORT_IGNORED_FILES_ENV_VAR,
        )

    context = RunContext(
        repo_html_url=repo_html_url.rstrip("/"),
        sha=sha,
        pr_html_url=pr_html_url.rstrip("/") if pr_html_url else None,
        issue_summary_type=verbosity,
        report_ignored_files=report_ignored_files,
    )
    logger.debug("Resolved run context for %s at %s.", context.repo_html_url, context.sha)
    return context
