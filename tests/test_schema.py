"""Input contract tests."""

from __future__ import annotations

import pytest
from lint_checks.schema import (
    Annotation,
    CheckRunConclusion,
    CheckRunOutput,
    CheckRunResult,
    LintState,
    ReportVerbosity,
    RuleSummary,
    RunContext,
)
from pydantic import ValidationError


@pytest.mark.unit
def test_annotation_rejects_inverted_line_range() -> None:
    with pytest.raises(ValidationError, match="end_line"):
        Annotation(path="src/a.js", start_line=12, end_line=10, message="Bad range.")


@pytest.mark.unit
def test_annotation_rejects_zero_line_numbers() -> None:
    with pytest.raises(ValidationError):
        Annotation(path="src/a.js", start_line=0, end_line=1, message="Bad line.")


@pytest.mark.unit
def test_lint_state_rejects_mismatched_rule_key() -> None:
    summary = RuleSummary(rule_id="no-var", level="error", message="Unexpected var.")

    with pytest.raises(ValidationError, match="does not match rule_id"):
        LintState(rules_summaries={"no-undef": summary})


@pytest.mark.unit
def test_lint_state_json_preserves_rule_insertion_order() -> None:
    payload = """
    {
        "error_count": 1,
        "warning_count": 1,
        "rules_summaries": {
            "no-var": {"rule_id": "no-var", "level": "warning", "message": "m"},
            "eqeqeq": {
                "rule_id": "eqeqeq",
                "level": "error",
                "message": "m",
                "annotations": [
                    {
                        "path": "src/a.js",
                        "start_line": 1,
                        "end_line": 1,
                        "message": "Expected ===.",
                        "suggestions": [{"desc": "Use ===."}]
                    }
                ]
            }
        }
    }
    """

    state = LintState.model_validate_json(payload)

    assert list(state.rules_summaries) == ["no-var", "eqeqeq"]
    assert state.rules_summaries["eqeqeq"].annotations[0].suggestions[0].desc == "Use ===."
    assert state.ignored_files == ()


@pytest.mark.unit
def test_lint_state_is_frozen() -> None:
    state = LintState()

    with pytest.raises(ValidationError):
        state.error_count = 3  # type: ignore[misc]


@pytest.mark.unit
def test_run_context_defaults_to_full_report_without_ignored_files() -> None:
    context = RunContext(repo_html_url="https://github.com/acme/rocket", sha="abc123")

    assert context.issue_summary_type is ReportVerbosity.FULL
    assert context.report_ignored_files is False
    assert context.pr_html_url is None


@pytest.mark.unit
def test_check_run_result_ignores_unknown_api_fields() -> None:
    result = CheckRunResult.model_validate(
        {
            "id": 7,
            "html_url": "https://github.com/acme/rocket/runs/7",
            "head_sha": "abc123",
            "status": "completed",
            "conclusion": "success",
            "app": {"slug": "github-actions"},
            "output": {"title": None, "summary": None, "annotations_count": 4, "text": None},
        }
    )

    assert result.conclusion is CheckRunConclusion.SUCCESS
    assert result.output.annotations_count == 4


@pytest.mark.unit
def test_check_run_result_allows_missing_conclusion() -> None:
    result = CheckRunResult.model_validate(
        {"id": 7, "html_url": "https://x/run/7", "status": "in_progress", "conclusion": None}
    )

    assert result.conclusion is None
    assert result.output.annotations_count == 0


@pytest.mark.unit
def test_annotation_rejects_fields_the_report_never_reads() -> None:
    with pytest.raises(ValidationError):
        Annotation.model_validate(
            {
                "path": "src/a.js",
                "start_line": 1,
                "end_line": 1,
                "message": "Unexpected var.",
                "annotation_level": "warning",
            }
        )


@pytest.mark.unit
def test_check_run_output_carries_only_title_and_summary() -> None:
    output = CheckRunOutput(title="ESLint Summary", summary="body")

    assert output.model_dump() == {"title": "ESLint Summary", "summary": "body"}
    with pytest.raises(ValidationError):
        CheckRunOutput.model_validate({"title": "ESLint Summary", "summary": "body", "text": "x"})
