"""Typer CLI for rendering and publishing lint check run reports."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, TypeVar

import httpx
import typer
from pydantic import BaseModel, ValidationError

from lint_checks.context import ContextConfigError, load_run_context, parse_bool_flag
from lint_checks.github_client import (
    GitHubApiError,
    GitHubAuthError,
    GitHubInputError,
    build_github_client,
    fetch_authenticated_user_login,
    fetch_check_run,
    get_github_token_with_source,
    update_check_run,
)
from lint_checks.output import (
    DEFAULT_REPORT_TITLE,
    build_check_run_output,
    render_check_run_report,
    render_ignored_files_summary,
)
from lint_checks.schema import CheckRunConclusion, CheckRunResult, LintState, RunContext

ModelT = TypeVar("ModelT", bound=BaseModel)

app = typer.Typer(help="Render ESLint results as a GitHub check run report.")

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_model(model_type: type[ModelT], path: Path) -> ModelT:
    """Read and validate one JSON input file."""
    return model_type.model_validate_json(path.read_text(encoding="utf-8"))


def _fail(command: str, reason: str) -> typer.Exit:
    logger.debug("%s failed", command, exc_info=True)
    typer.echo(f"{command} failed: {reason}")
    return typer.Exit(code=1)


def _resolve_context(
    *,
    repo_url: str | None,
    sha: str | None,
    pr_url: str | None,
    summary_type: str | None,
    report_ignored_files: str | None,
) -> RunContext:
    return load_run_context(
        repo_html_url=repo_url,
        sha=sha,
        pr_html_url=pr_url,
        issue_summary_type=summary_type,
        report_ignored_files=(
            None
            if report_ignored_files is None
            else parse_bool_flag(report_ignored_files, name="--report-ignored-files")
        ),
    )


RepoUrlOption = Annotated[
    str | None,
    typer.Option(help="Repository HTML URL. Defaults to GITHUB_SERVER_URL/GITHUB_REPOSITORY."),
]
ShaOption = Annotated[str | None, typer.Option(help="Linted commit SHA. Defaults to GITHUB_SHA.")]
PrUrlOption = Annotated[
    str | None,
    typer.Option(help="Pull request HTML URL. Defaults to LINT_REPORT_PR_URL."),
]
SummaryTypeOption = Annotated[
    str | None,
    typer.Option(help="Report verbosity: full|condensed. Defaults to INPUT_ISSUESUMMARYTYPE."),
]
ReportIgnoredOption = Annotated[
    str | None,
    typer.Option(
        help="List ignored files in full reports: true|false. Defaults to INPUT_REPORTIGNOREDFILES."
    ),
]
VerboseOption = Annotated[bool, typer.Option(help="Print debug logging.")]


@app.command("render")
def render_command(
    state: Annotated[Path, typer.Option(help="Lint state JSON file.")],
    check_run: Annotated[Path, typer.Option(help="Check run API response JSON file.")],
    repo_url: RepoUrlOption = None,
    sha: ShaOption = None,
    pr_url: PrUrlOption = None,
    summary_type: SummaryTypeOption = None,
    report_ignored_files: ReportIgnoredOption = None,
    force_ignored: Annotated[
        bool,
        typer.Option(help="Print only the ignored files list, regardless of other flags."),
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """Render a check run report to stdout."""
    _configure_logging(verbose)
    try:
        lint_state = _load_model(LintState, state)
        check_result = _load_model(CheckRunResult, check_run)
        context = _resolve_context(
            repo_url=repo_url,
            sha=sha,
            pr_url=pr_url,
            summary_type=summary_type,
            report_ignored_files=report_ignored_files,
        )
    except OSError as error:
        raise _fail("Render", f"could not read input ({error}).") from error
    except ValidationError as error:
        raise _fail("Render", f"invalid input ({error.error_count()} error(s)).") from error
    except ContextConfigError as error:
        raise _fail("Render", str(error)) from error

    if force_ignored:
        typer.echo(render_ignored_files_summary(lint_state, context, force=True))
        return
    typer.echo(render_check_run_report(check_result, lint_state, context))


@app.command("publish")
def publish_command(
    repo: Annotated[str, typer.Option(help="Repository in owner/repo format.")],
    check_run_id: Annotated[int, typer.Option(help="Check run id to update.")],
    state: Annotated[Path, typer.Option(help="Lint state JSON file.")],
    repo_url: RepoUrlOption = None,
    sha: ShaOption = None,
    pr_url: PrUrlOption = None,
    summary_type: SummaryTypeOption = None,
    report_ignored_files: ReportIgnoredOption = None,
    conclusion: Annotated[
        CheckRunConclusion | None,
        typer.Option(help="Complete the check run with this conclusion."),
    ] = None,
    title: Annotated[str, typer.Option(help="Check run output title.")] = DEFAULT_REPORT_TITLE,
    dry_run: Annotated[bool, typer.Option(help="Print the report instead of updating.")] = False,
    timeout_seconds: Annotated[
        int, typer.Option(help="GitHub API timeout in seconds.")
    ] = 20,
    trust_env: Annotated[
        bool,
        typer.Option(
            "--trust-env/--no-trust-env",
            help="Use proxy/SSL environment variables from the current shell.",
        ),
    ] = True,
    verbose: VerboseOption = False,
) -> None:
    """Render the report for a check run and write it to GitHub."""
    _configure_logging(verbose)
    try:
        lint_state = _load_model(LintState, state)
        context = _resolve_context(
            repo_url=repo_url,
            sha=sha,
            pr_url=pr_url,
            summary_type=summary_type,
            report_ignored_files=report_ignored_files,
        )
    except OSError as error:
        raise _fail("Publish", f"could not read input ({error}).") from error
    except ValidationError as error:
        raise _fail("Publish", f"invalid input ({error.error_count()} error(s)).") from error
    except ContextConfigError as error:
        raise _fail("Publish", str(error)) from error

    try:
        with build_github_client(timeout_seconds=timeout_seconds, trust_env=trust_env) as client:
            check_result = fetch_check_run(
                client=client,
                repo_full_name=repo,
                check_run_id=check_run_id,
            )
            if conclusion is not None:
                check_result = check_result.model_copy(
                    update={"conclusion": conclusion, "status": "completed"}
                )
            output = build_check_run_output(check_result, lint_state, context, title=title)
            if dry_run:
                typer.echo(output.summary)
                return
            updated = update_check_run(
                client=client,
                repo_full_name=repo,
                check_run_id=check_run_id,
                output=output,
                conclusion=conclusion,
            )
    except (GitHubAuthError, GitHubInputError) as error:
        raise _fail("Publish", str(error)) from error
    except GitHubApiError as error:
        raise _fail(
            "Publish", f"status={error.status_code} endpoint={error.endpoint}."
        ) from error
    except httpx.HTTPError as error:
        raise _fail("Publish", f"network error ({error}).") from error

    typer.echo(f"Updated check run {updated.id}: {updated.html_url}")


@app.command("auth-check")
def auth_check_command(
    repo: Annotated[
        str | None,
        typer.Option(help="Optional repository in owner/repo format for permission check."),
    ] = None,
    check_run_id: Annotated[
        int | None,
        typer.Option(help="Optional check run id used with --repo for permission check."),
    ] = None,
    timeout_seconds: Annotated[
        int, typer.Option(help="GitHub API timeout in seconds for the validation call.")
    ] = 20,
    trust_env: Annotated[
        bool,
        typer.Option(
            "--trust-env/--no-trust-env",
            help="Use proxy/SSL environment variables from the current shell.",
        ),
    ] = True,
) -> None:
    """Validate GitHub token setup and optional check run read access."""
    if (repo is None) != (check_run_id is None):
        raise typer.BadParameter("Provide both --repo and --check-run-id together, or neither.")

    try:
        _token, token_source = get_github_token_with_source()
    except GitHubAuthError as error:
        typer.echo(f"GitHub auth check failed: {error}")
        raise typer.Exit(code=1) from error

    typer.echo(f"Token detected in {token_source}.")

    try:
        with build_github_client(timeout_seconds=timeout_seconds, trust_env=trust_env) as client:
            login = fetch_authenticated_user_login(client=client)
            typer.echo(f"Authenticated as GitHub user '{login}'.")

            if repo is not None and check_run_id is not None:
                fetch_check_run(client=client, repo_full_name=repo, check_run_id=check_run_id)
                typer.echo(f"Check run access check passed for {repo} run {check_run_id}.")
    except GitHubInputError as error:
        typer.echo(f"GitHub auth check failed: {error}")
        raise typer.Exit(code=1) from error
    except GitHubApiError as error:
        typer.echo(
            "GitHub auth check failed: "
            f"status={error.status_code} endpoint={error.endpoint}."
        )
        raise typer.Exit(code=1) from error
    except httpx.HTTPError as error:
        typer.echo(f"GitHub auth check failed: network error ({error}).")
        raise typer.Exit(code=1) from error

    typer.echo("GitHub token setup is valid.")


def main() -> None:
    app()
