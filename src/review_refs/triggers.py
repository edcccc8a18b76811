"""Trigger keywords that route a free-text request to review categories.

Keywords match whole words, so "preview" never triggers a review. A keyword may
take a plural ``s``/``es``; one ending in ``*`` is a stem and matches any word
starting with it ("optimiz*" covers optimize, optimizing and optimization).
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Mapping, Sequence

from .models import Category

TRIGGER_KEYWORDS: Mapping[Category, tuple[str, ...]] = {
    Category.REVIEW: (
        "review*",
        "code review",
        "pull request",
        "look over",
        "feedback",
        "correctness",
    ),
    Category.SECURITY: (
        "security",
        "vulnerab*",
        "exploit*",
        "buffer overflow",
        "overflow*",
        "use-after-free",
        "use after free",
        "double free",
        "injection",
        "format string",
        "sanitiz*",
        "sanitis*",
        "cve",
        "untrusted",
    ),
    Category.PERFORMANCE: (
        "performance",
        "slow*",
        "latency",
        "throughput",
        "optimiz*",
        "optimis*",
        "allocat*",
        "cache miss",
        "hot path",
        "profil*",
        "benchmark*",
    ),
    Category.MODERNIZATION: (
        "moderniz*",
        "modernis*",
        "c++11",
        "c++14",
        "c++17",
        "c++20",
        "c++23",
        "c++20 module",
        "smart pointer",
        "raii",
        "legacy",
        "migrat*",
        "upgrade*",
    ),
    Category.ARCHITECTURE: (
        "architecture",
        "design",
        "module boundar*",
        "dependenc*",
        "coupling",
        "interface",
        "abi break",
        "binary compatib*",
        "layering",
        "refactor*",
    ),
}


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    if keyword.endswith("*"):
        return re.compile(r"(?<!\w)" + re.escape(keyword[:-1].lower()))
    return re.compile(r"(?<!\w)" + re.escape(keyword.lower()) + r"(?:s|es)?(?![\w+])")


def infer_categories(
    request: str | None,
    keywords: Mapping[Category, Sequence[str]] = TRIGGER_KEYWORDS,
) -> list[Category]:
    """Return the categories whose trigger keywords appear in ``request``."""

    lowered = (request or "").lower()
    matched = [
        category
        for category in Category
        if any(_keyword_pattern(token).search(lowered) for token in keywords.get(category, ()))
    ]
    # plain review when nothing more specific was asked for
    return matched or [Category.REVIEW]
