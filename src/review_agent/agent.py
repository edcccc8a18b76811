"""Reference-guided C/C++ review agent."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Sequence

from review_refs import (
    AgentDescriptor,
    Category,
    ReferenceSelector,
    Severity,
    format_findings,
    infer_categories,
    load_descriptor,
)

from .core import ReviewMessage, build_user_prompt, compose_system_prompt
from .llm import LLMReview, ReviewBackend, ReviewFinding, build_reviewer_from_env
from .report import ReviewReportEntry, ReviewReportWriter

logger = logging.getLogger(__name__)

DEFAULT_REPORT_PATH = "review_reports.jsonl"


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of running the review agent."""

    categories: tuple[Category, ...]
    summary: str = ""
    findings: tuple[ReviewFinding, ...] = tuple()
    clarifying_question: str | None = None
    conversation_history: tuple[dict[str, str], ...] = tuple()

    def by_severity(self) -> dict[Severity, tuple[ReviewFinding, ...]]:
        return {
            severity: tuple(finding for finding in self.findings if finding.severity is severity)
            for severity in Severity
        }

    def highest_severity(self) -> Severity | None:
        if not self.findings:
            return None
        return min((finding.severity for finding in self.findings), key=lambda severity: severity.rank)

    def messages(self) -> tuple[ReviewMessage, ...]:
        return tuple(
            ReviewMessage(role=message.get("role", ""), content=message.get("content", ""))
            for message in self.conversation_history
        )

    def render(self) -> str:
        if self.clarifying_question:
            return self.clarifying_question
        header = ", ".join(category.value for category in self.categories)
        parts = [f"## Review ({header})"]
        if self.summary:
            parts.append(self.summary)
        parts.append(format_findings(self.findings))
        return "\n\n".join(parts)


class ReviewAgent:
    """Selects reference material for a request and delegates the review to an LLM backend."""

    def __init__(
        self,
        backend: ReviewBackend | None = None,
        selector: ReferenceSelector | None = None,
        descriptor: AgentDescriptor | None = None,
        report_path: str | None = None,
    ) -> None:
        self._descriptor = descriptor or load_descriptor()
        self._backend = backend or build_reviewer_from_env(model=self._descriptor.model)
        self._selector = selector or ReferenceSelector()
        resolved_report_path = report_path or os.getenv("REVIEW_REPORT_PATH", DEFAULT_REPORT_PATH)
        self._report_writer = ReviewReportWriter(resolved_report_path) if resolved_report_path else None

    def resolve_categories(
        self,
        *,
        request: str | None = None,
        categories: Iterable[Category | str] | None = None,
    ) -> tuple[Category, ...]:
        """
        Decide which reference categories apply to a request.

        Explicit ``categories`` win and are validated; otherwise they are inferred from
        trigger keywords in ``request``. Categories the descriptor disables are dropped
        unless that would leave nothing to review.
        """
        if isinstance(categories, (str, Category)):
            categories = [categories]
        if categories:
            requested = _dedupe(Category.parse(category) for category in categories)
        else:
            requested = tuple(infer_categories(request))

        enabled = tuple(category for category in requested if self._descriptor.enables(category))
        return enabled or requested

    def review(
        self,
        code: str,
        *,
        request: str | None = None,
        categories: Iterable[Category | str] | None = None,
        filename: str | None = None,
        conversation_history: Sequence[dict[str, str]] | None = None,
    ) -> ReviewResult:
        """
        Review ``code`` against the reference checklists for the resolved categories.

        Args:
            code: Source text under review.
            request: Free-text ask; used for trigger-keyword inference and as the prompt lead.
            categories: Explicit categories, bypassing inference.
            filename: Name shown to the model and used in finding locations.
            conversation_history: Earlier turns (system/user/AI) for follow-up reviews.
        """
        if not code or not code.strip():
            raise ValueError("ReviewAgent.review requires non-empty code.")

        resolved = self.resolve_categories(request=request, categories=categories)
        bundles = [(category.value, self._selector.render(category)) for category in resolved]
        system_prompt = compose_system_prompt(self._descriptor, bundles)
        user_prompt = build_user_prompt(code, request, filename)

        logger.debug("Reviewing %s for categories %s", filename or "<input>", [c.value for c in resolved])
        llm_review = self._backend.review(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            conversation_history=list(conversation_history or []) or None,
        )
        return self._convert_llm_review(llm_review, resolved, filename)

    def record_report(self, result: ReviewResult, *, code: str, filename: str | None = None) -> str:
        """Append a finished review to the report log and return its id."""
        if result.clarifying_question:
            raise ValueError("Cannot record a review while a clarifying question is pending.")
        if not self._report_writer:
            raise RuntimeError("Report writer is not configured; cannot record review.")

        entry = ReviewReportEntry.create(
            categories=result.categories,
            summary=result.summary,
            code=code,
            findings=result.findings,
            filename=filename,
        )
        self._report_writer.write(entry)
        return entry.report_id

    @staticmethod
    def _convert_llm_review(
        llm_review: LLMReview,
        categories: tuple[Category, ...],
        filename: str | None,
    ) -> ReviewResult:
        history = tuple(llm_review.conversation_history)
        if llm_review.clarifying_question and not llm_review.findings:
            return ReviewResult(
                categories=categories,
                clarifying_question=llm_review.clarifying_question,
                conversation_history=history,
            )

        findings = tuple(
            sorted(
                (_with_default_file(finding, filename) for finding in llm_review.findings),
                key=lambda finding: (finding.severity.rank, finding.line or 0),
            )
        )
        return ReviewResult(
            categories=categories,
            summary=llm_review.summary,
            findings=findings,
            conversation_history=history,
        )


def _with_default_file(finding: ReviewFinding, filename: str | None) -> ReviewFinding:
    if finding.file or not filename:
        return finding
    return ReviewFinding(
        severity=finding.severity,
        issue=finding.issue,
        recommendation=finding.recommendation,
        file=filename,
        line=finding.line,
    )


def _dedupe(categories: Iterable[Category]) -> tuple[Category, ...]:
    seen: list[Category] = []
    for category in categories:
        if category not in seen:
            seen.append(category)
    return tuple(seen)
