"""Severity-tagged output templates handed to the review agent."""

from __future__ import annotations

from typing import Iterable, Protocol

from .models import Category, Severity

SEVERITY_GUIDE = "\n".join(
    f"- {severity.value} ({severity.label}): {severity.description}" for severity in Severity
)

FINDING_LINE = "- [{severity}] {location} — {issue}. Fix: {recommendation}"

_TITLES: dict[Category, str] = {
    Category.REVIEW: "C/C++ Code Review",
    Category.SECURITY: "C/C++ Security Review",
    Category.PERFORMANCE: "C/C++ Performance Review",
    Category.MODERNIZATION: "Modern C++ Migration Review",
    Category.ARCHITECTURE: "C/C++ Architecture Review",
}


class FindingLike(Protocol):
    severity: Severity
    issue: str
    recommendation: str
    file: str | None
    line: int | None


def render_output_template(category: Category) -> str:
    """Return the markdown skeleton the agent fills in for ``category``."""

    lines = [
        f"## {_TITLES[category]}",
        "",
        "Severity levels:",
        SEVERITY_GUIDE,
        "",
        "### Summary",
        "<one paragraph: overall assessment and the most important fix>",
        "",
    ]
    for severity in Severity:
        lines.append(f"### {severity.value} — {severity.label}")
        lines.append(
            FINDING_LINE.format(
                severity=severity.value,
                location="<file>:<line>",
                issue="<issue>",
                recommendation="<recommendation>",
            )
        )
        lines.append("")
    lines.append("### Positive observations")
    lines.append("- <what the change does well>")
    return "\n".join(lines)


def format_findings(findings: Iterable[FindingLike]) -> str:
    """Group findings by severity using the template's line format."""

    grouped: dict[Severity, list[FindingLike]] = {severity: [] for severity in Severity}
    for finding in findings:
        grouped[finding.severity].append(finding)

    sections: list[str] = []
    for severity, items in grouped.items():
        if not items:
            continue
        sections.append(f"### {severity.value} — {severity.label}")
        for item in items:
            sections.append(
                FINDING_LINE.format(
                    severity=severity.value,
                    location=_location(item),
                    issue=item.issue.rstrip(". "),
                    recommendation=item.recommendation,
                )
            )
        sections.append("")

    if not sections:
        return "No issues found."
    return "\n".join(sections).rstrip()


def _location(finding: FindingLike) -> str:
    file_name = finding.file or "<input>"
    if finding.line is None:
        return file_name
    return f"{file_name}:{finding.line}"
