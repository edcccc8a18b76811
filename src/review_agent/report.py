"""Review report persistence helpers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterator, Sequence
from uuid import uuid4

from review_refs import Category, Severity

from .llm import ReviewFinding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewReportEntry:
    report_id: str
    created_at: str
    filename: str | None
    categories: Sequence[Category]
    summary: str
    code_excerpt: str
    findings: Sequence[ReviewFinding] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        *,
        categories: Sequence[Category],
        summary: str,
        code: str,
        findings: Sequence[ReviewFinding],
        filename: str | None = None,
        excerpt_chars: int = 2000,
    ) -> "ReviewReportEntry":
        return cls(
            report_id=str(uuid4()),
            created_at=datetime.now(tz=UTC).isoformat(timespec="seconds"),
            filename=filename,
            categories=list(categories),
            summary=summary,
            code_excerpt=code[:excerpt_chars],
            findings=list(findings),
        )

    def highest_severity(self) -> Severity | None:
        if not self.findings:
            return None
        return min((finding.severity for finding in self.findings), key=lambda severity: severity.rank)

    def to_serializable(self) -> dict:
        return {
            "report_id": self.report_id,
            "created_at": self.created_at,
            "filename": self.filename,
            "categories": [category.value for category in self.categories],
            "summary": self.summary,
            "code_excerpt": self.code_excerpt,
            "findings": [
                {
                    "severity": finding.severity.value,
                    "issue": finding.issue,
                    "recommendation": finding.recommendation,
                    "file": finding.file,
                    "line": finding.line,
                }
                for finding in self.findings
            ],
        }

    @classmethod
    def from_serializable(cls, data: dict) -> "ReviewReportEntry":
        findings = [
            ReviewFinding(
                severity=Severity(finding["severity"]),
                issue=finding["issue"],
                recommendation=finding["recommendation"],
                file=finding.get("file"),
                line=finding.get("line"),
            )
            for finding in data.get("findings", [])
        ]
        return cls(
            report_id=data["report_id"],
            created_at=data["created_at"],
            filename=data.get("filename"),
            categories=[Category.parse(name) for name in data.get("categories", [])],
            summary=data.get("summary", ""),
            code_excerpt=data.get("code_excerpt", ""),
            findings=findings,
        )


class ReviewReportWriter:
    """Append-only JSONL writer for review reports."""

    def __init__(self, path: str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: ReviewReportEntry) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as handle:
            json_line = json.dumps(entry.to_serializable(), ensure_ascii=False)
            handle.write(json_line + "\n")
        logger.info("Recorded review report %s in %s", entry.report_id, self._path)


class ReviewReportReader:
    """Walks a review report log, oldest entry first."""

    def __init__(self, path: str) -> None:
        self._path = Path(path)

    def entries(self) -> Iterator[ReviewReportEntry]:
        if not self._path.exists():
            raise FileNotFoundError(f"Report log '{self._path}' not found")

        with self._path.open("r", encoding="utf-8") as handle:
            for number, line in enumerate(handle, start=1):
                if not line.strip():
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError as exc:
                    raise ValueError(f"Report log '{self._path}' line {number} is not valid JSON") from exc
                yield ReviewReportEntry.from_serializable(data)

    def get(self, report_id: str) -> ReviewReportEntry:
        for entry in self.entries():
            if entry.report_id == report_id:
                return entry
        raise ValueError(f"Report id '{report_id}' not found in log '{self._path}'")

    def for_file(self, filename: str) -> list[ReviewReportEntry]:
        """Reports recorded for ``filename``, so repeated reviews of one file can be compared."""
        return [entry for entry in self.entries() if entry.filename == filename]

