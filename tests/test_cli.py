import pytest

import review_cli
from review_agent import ReviewFinding
from review_agent.llm import LLMReview
from review_refs import Severity

SOURCE = "void copy(const char* s) {\n  char buf[64];\n  strcpy(buf, s);\n}\n"


class StubBackend:
    def __init__(self, review: LLMReview):
        self.result = review
        self.calls: list[dict] = []

    def review(self, *, system_prompt, user_prompt, conversation_history=None):
        self.calls.append({"system_prompt": system_prompt, "user_prompt": user_prompt})
        return self.result


@pytest.fixture
def review_env(tmp_path, monkeypatch):
    review = LLMReview(
        summary="One overflow.",
        findings=[ReviewFinding(Severity.P0, "strcpy into a fixed buffer", "Use snprintf", line=3)],
    )
    backend = StubBackend(review)
    monkeypatch.setattr("review_agent.agent.build_reviewer_from_env", lambda model=None: backend)
    log_path = tmp_path / "reports.jsonl"
    monkeypatch.setenv("REVIEW_REPORT_PATH", str(log_path))
    source = tmp_path / "copy.c"
    source.write_text(SOURCE, encoding="utf-8")
    return source, log_path, backend


def test_list_prints_each_category(capsys):
    assert review_cli.main(["list"]) == 0

    out = capsys.readouterr().out
    assert "security: security-checklist" in out
    assert "review: review-checklist, severity-levels" in out


def test_show_prints_bundle(capsys):
    assert review_cli.main(["show", "modernization"]) == 0

    out = capsys.readouterr().out
    assert "# Modern C++ Migration Guide" in out
    assert "## Modern C++ Migration Review" in out


def test_show_template_only(capsys):
    assert review_cli.main(["show", "security", "--template-only"]) == 0

    out = capsys.readouterr().out
    assert "# C/C++ Security Checklist" not in out
    assert "### P0 — Critical" in out


def test_show_unknown_category_exits_with_error(capsys):
    assert review_cli.main(["show", "bogus"]) == review_cli.EXIT_INVALID_CATEGORY

    assert "Unknown review category 'bogus'" in capsys.readouterr().err


def test_infer_prints_categories(capsys):
    assert review_cli.main(["infer", "is", "this", "too", "slow?"]) == 0

    assert capsys.readouterr().out.strip() == "performance"


def test_review_prints_findings_and_records_report(review_env, capsys):
    source, log_path, backend = review_env

    assert review_cli.main(["review", str(source), "--category", "security"]) == 0

    out = capsys.readouterr().out
    assert "- [P0] copy.c:3 — strcpy into a fixed buffer. Fix: Use snprintf" in out
    assert "Report recorded with id" in out
    assert "# C/C++ Security Checklist" in backend.calls[0]["system_prompt"]
    assert len(log_path.read_text(encoding="utf-8").splitlines()) == 1


def test_review_no_record_skips_report_log(review_env, capsys):
    source, log_path, _ = review_env

    assert review_cli.main(["review", str(source), "--no-record"]) == 0

    assert "Report recorded" not in capsys.readouterr().out
    assert not log_path.exists()


def test_history_lists_reports_for_file(review_env, capsys):
    source, _, _ = review_env
    review_cli.main(["review", str(source)])
    capsys.readouterr()

    assert review_cli.main(["history", str(source)]) == 0

    out = capsys.readouterr().out
    assert "[P0] 1 finding(s)" in out


def test_history_without_log_exits_with_error(tmp_path, capsys):
    missing = tmp_path / "missing.jsonl"

    assert review_cli.main(["history", "copy.c", "--log", str(missing)]) == review_cli.EXIT_MISSING_FILE

    assert "not found" in capsys.readouterr().err
