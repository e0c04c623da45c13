"""GitHub check-run API wrapper and auth helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import httpx
from dotenv import load_dotenv
from pydantic import ValidationError

from lint_checks.schema import CheckRunConclusion, CheckRunOutput, CheckRunResult

GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_JSON_ACCEPT = "application/vnd.github+json"

logger = logging.getLogger(__name__)


class GitHubAuthError(RuntimeError):
    """Raised when required GitHub authentication is missing."""


class GitHubInputError(ValueError):
    """Raised when repository or check run input values are invalid."""


class GitHubApiError(RuntimeError):
    """Raised when a GitHub API request fails."""

    def __init__(self, message: str, *, status_code: int, endpoint: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class GitHubRateLimitError(GitHubApiError):
    """Raised when GitHub API rate limiting rejected the request."""


def _ensure_mapping(value: object, *, context: str) -> dict[str, Any]:
    """Ensure a response fragment is a JSON object."""
    if not isinstance(value, dict):
        raise GitHubApiError(
            f"Expected JSON object for {context}.",
            status_code=500,
            endpoint=context,
        )
    return value


def _require_str(payload: dict[str, Any], *, key: str, endpoint: str) -> str:
    """Read a required string field from payload."""
    value = payload.get(key)
    if not isinstance(value, str):
        raise GitHubApiError(
            f"Expected string field '{key}' in GitHub response.",
            status_code=500,
            endpoint=endpoint,
        )
    return value


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    return response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0"


def _raise_http_error(response: httpx.Response, endpoint: str) -> None:
    """Raise a typed error for a non-success GitHub API response."""
    message = f"GitHub API request failed with status {response.status_code} for '{endpoint}'."
    if _is_rate_limited(response):
        raise GitHubRateLimitError(
            message,
            status_code=response.status_code,
            endpoint=endpoint,
        )
    raise GitHubApiError(
        message,
        status_code=response.status_code,
        endpoint=endpoint,
    )


def _request_json(
    client: httpx.Client,
    method: str,
    endpoint: str,
    *,
    json_body: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Perform a single JSON request against GitHub API."""
    logger.debug("GitHub %s %s", method, endpoint)
    response = client.request(
        method,
        endpoint,
        json=json_body,
        headers={"Accept": GITHUB_JSON_ACCEPT},
    )
    if response.status_code >= 400:
        _raise_http_error(response, endpoint)
    try:
        payload = response.json()
    except ValueError as error:
        raise GitHubApiError(
            "Expected JSON body in GitHub response.",
            status_code=500,
            endpoint=endpoint,
        ) from error
    return _ensure_mapping(payload, context=endpoint)


def _parse_check_run(payload: dict[str, Any], *, endpoint: str) -> CheckRunResult:
    """Validate a check run payload into the result model."""
    try:
        return CheckRunResult.model_validate(payload)
    except ValidationError as error:
        raise GitHubApiError(
            f"Unexpected check run shape in GitHub response: {error.error_count()} error(s).",
            status_code=500,
            endpoint=endpoint,
        ) from error


def parse_repo_full_name(repo_full_name: str) -> tuple[str, str]:
    """Parse and validate repository input in owner/repo format."""
    owner, separator, repo = repo_full_name.strip().partition("/")
    if not separator or not owner or not repo or "/" in repo:
        raise GitHubInputError(
            f"Invalid repo '{repo_full_name}'. Expected format is owner/repo."
        )
    return owner, repo


def validate_check_run_id(check_run_id: int) -> int:
    """Validate and normalize check run id input."""
    if check_run_id <= 0:
        raise GitHubInputError(
            f"Invalid check run id '{check_run_id}'. Expected a positive integer."
        )
    return check_run_id


def _check_run_endpoint(repo_full_name: str, check_run_id: int) -> str:
    owner, repo = parse_repo_full_name(repo_full_name)
    return f"/repos/{owner}/{repo}/check-runs/{validate_check_run_id(check_run_id)}"


def fetch_check_run(
    *,
    client: httpx.Client,
    repo_full_name: str,
    check_run_id: int,
) -> CheckRunResult:
    """Fetch one check run."""
    endpoint = _check_run_endpoint(repo_full_name, check_run_id)
    payload = _request_json(client, "GET", endpoint)
    return _parse_check_run(payload, endpoint=endpoint)


def update_check_run(
    *,
    client: httpx.Client,
    repo_full_name: str,
    check_run_id: int,
    output: CheckRunOutput,
    conclusion: CheckRunConclusion | None = None,
) -> CheckRunResult:
    """Replace a check run's output, optionally completing it with a conclusion."""
    endpoint = _check_run_endpoint(repo_full_name, check_run_id)
    body: dict[str, Any] = {"output": output.model_dump(exclude_none=True)}
    if conclusion is not None:
        body["status"] = "completed"
        body["conclusion"] = conclusion.value
    payload = _request_json(client, "PATCH", endpoint, json_body=body)
    result = _parse_check_run(payload, endpoint=endpoint)
    logger.info("Updated check run %s on %s.", result.id, repo_full_name)
    return result


def get_github_token() -> str:
    """Read GitHub token from environment and fail fast if missing."""
    token, _source = get_github_token_with_source()
    return token


def get_github_token_with_source() -> tuple[str, str]:
    """Read GitHub token and return token value with environment source key."""
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    github_token = os.getenv("GITHUB_TOKEN")
    if github_token:
        return github_token, "GITHUB_TOKEN"

    gh_token = os.getenv("GH_TOKEN")
    if gh_token:
        return gh_token, "GH_TOKEN"

    message = "Missing GitHub token. Set GITHUB_TOKEN (preferred) or GH_TOKEN."
    raise GitHubAuthError(message)


def fetch_authenticated_user_login(*, client: httpx.Client) -> str:
    """Fetch authenticated GitHub user login for token validation."""
    endpoint = "/user"
    payload = _request_json(client, "GET", endpoint)
    return _require_str(payload, key="login", endpoint=endpoint)


def build_github_client(
    timeout_seconds: int = 20,
    *,
    trust_env: bool = True,
) -> httpx.Client:
    """Build an authenticated GitHub HTTP client."""
    token = get_github_token()
    headers = {
        "Accept": GITHUB_JSON_ACCEPT,
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }
    return httpx.Client(
        base_url=GITHUB_API_BASE_URL,
        headers=headers,
        timeout=timeout_seconds,
        trust_env=trust_env,
    )
