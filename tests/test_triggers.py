import pytest

from review_refs import Category, infer_categories


@pytest.mark.parametrize(
    ("request_text", "expected"),
    [
        ("Is there a possible use-after-free here?", [Category.SECURITY]),
        ("This loop is slow, can you optimize it?", [Category.PERFORMANCE]),
        ("Help me migrate this to C++17 smart pointers", [Category.MODERNIZATION]),
        ("Does the coupling between these components make sense?", [Category.ARCHITECTURE]),
        ("Please review this pull request", [Category.REVIEW]),
    ],
)
def test_infer_categories_matches_trigger_keywords(request_text, expected):
    assert infer_categories(request_text) == expected


def test_multiple_categories_keep_canonical_order():
    categories = infer_categories("Check this hot path for buffer overflow and latency")

    assert categories == [Category.SECURITY, Category.PERFORMANCE]


def test_falls_back_to_general_review():
    assert infer_categories("what do you think?") == [Category.REVIEW]
    assert infer_categories("") == [Category.REVIEW]
    assert infer_categories(None) == [Category.REVIEW]


def test_custom_keyword_table():
    keywords = {Category.SECURITY: ("tainted",)}

    assert infer_categories("tainted input", keywords=keywords) == [Category.SECURITY]


@pytest.mark.parametrize(
    ("request_text", "expected"),
    [
        ("Preview the latency numbers", [Category.PERFORMANCE]),
        ("Designated initializers made this slow", [Category.PERFORMANCE]),
        ("Can we split this into C++20 modules?", [Category.MODERNIZATION]),
        ("These modules look fine to me", [Category.REVIEW]),
        ("The system has the ability to retry", [Category.REVIEW]),
    ],
)
def test_keywords_only_match_whole_words(request_text, expected):
    assert infer_categories(request_text) == expected


def test_stem_keywords_match_word_forms():
    assert infer_categories("Profiling shows too many allocations") == [Category.PERFORMANCE]
    assert infer_categories("Known vulnerabilities in the parser?") == [Category.SECURITY]
    assert infer_categories("We are refactoring the dependencies") == [Category.ARCHITECTURE]
