"""Check run markdown report rendering."""

from __future__ import annotations

from lint_checks.schema import (
    Annotation,
    CheckRunOutput,
    CheckRunResult,
    LintState,
    ReportVerbosity,
    RuleSummary,
    RunContext,
)

SECTION_DIVIDER = "---"
SUGGESTION_PREFIX = "    * [SUGGESTION] "
DEFAULT_REPORT_TITLE = "ESLint Summary"
PENDING_CONCLUSION = "pending"
# GitHub rejects check run output fields longer than 65535 characters.
MAX_CHECK_RUN_SUMMARY_LENGTH = 65535
TRUNCATION_NOTICE = "\n\n... (report truncated, see the annotations page for all findings) ..."

CREDIT_TAG = "<sup>\n  Report generated by <b>lint-checks-report</b>\n</sup>"
REPORT_FOOTER = f"{SECTION_DIVIDER}\n\n{CREDIT_TAG}"

_TABLE_COLUMN_WIDTHS = (12, 23, 28)


def _table_row(*cells: str) -> str:
    padded = (cell.ljust(width) for cell, width in zip(cells, _TABLE_COLUMN_WIDTHS, strict=True))
    return "| " + " | ".join(padded) + " |"


def resolve_check_url(check_result: CheckRunResult, context: RunContext) -> str:
    """Return the PR checks view when a PR is known, else the check run page."""
    if context.pr_html_url:
        return f"{context.pr_html_url}/checks?check_run_id={check_result.id}"
    return check_result.html_url


def render_report_header(check_url: str, context: RunContext) -> str:
    """Render the report title and the pointer to inline annotations."""
    title = f"## {DEFAULT_REPORT_TITLE} [View Full Report]({check_url})"
    if context.pr_html_url:
        hint = (
            f"> Annotations are provided inline on the [Files Changed]({context.pr_html_url}/files)"
            " tab. You can also see all annotations that were generated on the "
            f"[annotations page]({check_url})."
        )
    else:
        hint = (
            "> You can see all annotations that were generated on the "
            f"[annotations page]({check_url})."
        )
    return f"{title}\n\n{hint}"


def render_lint_summary(state: LintState) -> str:
    """Render the fixed-column table of occurrence and fixable counts."""
    type_width, occurrences_width, fixable_width = _TABLE_COLUMN_WIDTHS
    rows = [
        _table_row(
            "Type".center(type_width),
            "Occurrences".center(occurrences_width),
            "Fixable".center(fixable_width),
        ),
        _table_row(*("-" * width for width in _TABLE_COLUMN_WIDTHS)),
        _table_row("**Errors**", str(state.error_count), str(state.fixable_error_count)),
        _table_row("**Warnings**", str(state.warning_count), str(state.fixable_warning_count)),
        _table_row("**Ignored**", str(state.ignored_count), "N/A"),
    ]
    return "\n".join(rows)


def render_lint_conclusions(check_result: CheckRunResult, check_url: str) -> str:
    """Render the conclusion and annotation total lines."""
    conclusion = check_result.conclusion or PENDING_CONCLUSION
    annotations_count = check_result.output.annotations_count
    return (
        f"- **Result:**       {conclusion}\n"
        f"- **Annotations:** [{annotations_count} total]({check_url})"
    )


def render_ignored_files_summary(
    state: LintState,
    context: RunContext,
    force: bool = False,
) -> str:
    """Render the ignored files list, or an empty string when not requested."""
    if not force and (
        not context.report_ignored_files
        or context.issue_summary_type != ReportVerbosity.FULL
    ):
        return ""
    lines = [SECTION_DIVIDER, "", "## Ignored Files:", ""]
    lines.extend(f"- {file_path}" for file_path in state.ignored_files)
    return "\n".join(lines)


def render_rule_summary_title(summary: RuleSummary) -> str:
    """Render a rule heading, linking the rule documentation when known."""
    if summary.rule_url:
        return f"## [{summary.level}] [{summary.rule_id}]({summary.rule_url})"
    return f"## [{summary.level}] {summary.rule_id}"


def render_annotation_line_label(annotation: Annotation) -> str:
    if annotation.end_line == annotation.start_line:
        return f"Line {annotation.start_line}"
    return f"Line {annotation.start_line}-{annotation.end_line}"


def render_annotation_file_link(annotation: Annotation, context: RunContext) -> str:
    """Link the annotated line range at the linted commit."""
    url = (
        f"{context.repo_html_url}/blob/{context.sha}/{annotation.path}"
        f"#L{annotation.start_line}-L{annotation.end_line}"
    )
    return f"[{annotation.path}]({url})"


def render_annotation_suggestions(annotation: Annotation) -> str:
    return "\n".join(
        f"{SUGGESTION_PREFIX}{suggestion.desc}" for suggestion in annotation.suggestions
    )


def render_lint_annotation(annotation: Annotation, context: RunContext) -> str:
    """Render one annotation bullet, with suggestions in full reports."""
    line = (
        f"- {render_annotation_file_link(annotation, context)} "
        f"{render_annotation_line_label(annotation)} - {annotation.message}"
    )
    if context.issue_summary_type == ReportVerbosity.FULL and annotation.suggestions:
        return f"{line}\n{render_annotation_suggestions(annotation)}"
    return line


def render_rule_summary(summary: RuleSummary, context: RunContext) -> str:
    annotations = "\n".join(
        render_lint_annotation(annotation, context) for annotation in summary.annotations
    )
    parts = [render_rule_summary_title(summary), f"> {summary.message}"]
    if annotations:
        parts.append(annotations)
    return "\n\n".join(parts)


def sort_rule_summaries(state: LintState) -> list[RuleSummary]:
    """Order rule summaries by level label, case-insensitively.

    `sorted` is stable, so summaries sharing a level keep insertion order.
    """
    return sorted(state.rules_summaries.values(), key=lambda summary: summary.level.casefold())


def render_sorted_rule_summaries(state: LintState, context: RunContext) -> str:
    """Render every rule section, or an empty string when there are none."""
    if not state.rules_summaries:
        return ""
    sections = [render_rule_summary(summary, context) for summary in sort_rule_summaries(state)]
    divider = f"\n\n{SECTION_DIVIDER}\n\n"
    return f"{SECTION_DIVIDER}\n\n{divider.join(sections)}"


def render_check_run_report(
    check_result: CheckRunResult,
    state: LintState,
    context: RunContext,
) -> str:
    """Render the full check run report body."""
    check_url = resolve_check_url(check_result, context)
    fragments = [
        render_report_header(check_url, context),
        render_lint_summary(state),
        render_lint_conclusions(check_result, check_url),
        render_ignored_files_summary(state, context),
        render_sorted_rule_summaries(state, context),
        REPORT_FOOTER,
    ]
    return "\n\n".join(fragment for fragment in fragments if fragment)


def truncate_check_run_summary(text: str, limit: int = MAX_CHECK_RUN_SUMMARY_LENGTH) -> str:
    """Clip text to the GitHub output limit, appending a truncation notice."""
    if len(text) <= limit:
        return text
    return text[: limit - len(TRUNCATION_NOTICE)] + TRUNCATION_NOTICE


def build_check_run_output(
    check_result: CheckRunResult,
    state: LintState,
    context: RunContext,
    *,
    title: str = DEFAULT_REPORT_TITLE,
) -> CheckRunOutput:
    """Build the `output` payload for a check run update."""
    report = render_check_run_report(check_result, state, context)
    return CheckRunOutput(title=title, summary=truncate_check_run_summary(report))
