from review_agent import ReviewFinding
from review_refs import Category, Severity, format_findings, render_output_template
from review_refs.templates import SEVERITY_GUIDE


def test_severity_ordering_and_labels():
    assert [severity.rank for severity in Severity] == [0, 1, 2, 3]
    assert Severity.P0.label == "Critical"
    assert Severity.P3.label == "Low"


def test_output_template_lists_every_severity():
    template = render_output_template(Category.PERFORMANCE)

    assert template.startswith("## C/C++ Performance Review")
    for severity in Severity:
        assert f"### {severity.value} — {severity.label}" in template
    assert SEVERITY_GUIDE in template
    assert "### Positive observations" in template


def test_format_findings_groups_by_severity():
    findings = [
        ReviewFinding(Severity.P2, "Copies vector by value", "Pass by const reference", file="a.cpp", line=10),
        ReviewFinding(Severity.P0, "strcpy into fixed buffer.", "Use std::string", file="a.cpp", line=3),
        ReviewFinding(Severity.P2, "Missing reserve", "Call reserve before the loop"),
    ]

    text = format_findings(findings)

    assert text.index("### P0 — Critical") < text.index("### P2 — Medium")
    assert "- [P0] a.cpp:3 — strcpy into fixed buffer. Fix: Use std::string" in text
    assert "- [P2] <input> — Missing reserve. Fix: Call reserve before the loop" in text
    assert "P1" not in text


def test_format_findings_without_findings():
    assert format_findings([]) == "No issues found."
