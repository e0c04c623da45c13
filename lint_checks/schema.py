"""Input contracts for lint report rendering."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReportVerbosity(StrEnum):
    """How much detail the rendered report includes."""

    FULL = "full"
    CONDENSED = "condensed"


class CheckRunConclusion(StrEnum):
    """Final conclusions a GitHub check run can report."""

    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"
    STALE = "stale"


class Suggestion(BaseModel):
    """A fix proposed by the linter for one annotation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    desc: str = Field(min_length=1)


class Annotation(BaseModel):
    """One lint finding anchored to a file and line range."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str = Field(min_length=1)
    start_line: int = Field(ge=1)
    end_line: int = Field(ge=1)
    message: str
    suggestions: tuple[Suggestion, ...] = ()

    @model_validator(mode="after")
    def validate_line_range(self) -> Annotation:
        """Validate that end_line is not smaller than start_line."""
        if self.end_line < self.start_line:
            raise ValueError("end_line must be greater than or equal to start_line")
        return self


class RuleSummary(BaseModel):
    """All annotations produced by one lint rule."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    rule_id: str = Field(min_length=1)
    level: str = Field(min_length=1)
    message: str
    rule_url: str | None = None
    annotations: tuple[Annotation, ...] = ()


class LintState(BaseModel):
    """Aggregate lint results for one run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    error_count: int = Field(default=0, ge=0)
    fixable_error_count: int = Field(default=0, ge=0)
    warning_count: int = Field(default=0, ge=0)
    fixable_warning_count: int = Field(default=0, ge=0)
    ignored_count: int = Field(default=0, ge=0)
    ignored_files: tuple[str, ...] = ()
    rules_summaries: dict[str, RuleSummary] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_rule_keys(self) -> LintState:
        """Validate that every mapping key matches its summary's rule_id."""
        for rule_id, summary in self.rules_summaries.items():
            if rule_id != summary.rule_id:
                raise ValueError(
                    f"rules_summaries key '{rule_id}' does not match rule_id '{summary.rule_id}'."
                )
        return self


class RunContext(BaseModel):
    """Repository and reporting options for one lint run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    repo_html_url: str = Field(min_length=1)
    sha: str = Field(min_length=1)
    pr_html_url: str | None = None
    issue_summary_type: ReportVerbosity = ReportVerbosity.FULL
    report_ignored_files: bool = False


class CheckRunOutputSummary(BaseModel):
    """Subset of a check run's `output` object."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str | None = None
    summary: str | None = None
    annotations_count: int = Field(default=0, ge=0)


class CheckRunResult(BaseModel):
    """Check run as returned by the GitHub create/update/get endpoints."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(ge=1)
    html_url: str
    status: str | None = None
    conclusion: CheckRunConclusion | None = None
    output: CheckRunOutputSummary = Field(default_factory=CheckRunOutputSummary)


class CheckRunOutput(BaseModel):
    """Output payload sent to the check-run update endpoint."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str = Field(min_length=1)
    summary: str
