"""Core primitives for composing review prompts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from review_refs import AgentDescriptor

SECTION_RULE = "=" * 72


@dataclass(frozen=True)
class ReviewMessage:
    """Simple, typed container for conversation messages."""

    role: str
    content: str

    def pretty(self) -> str:
        """Return the message as a CLI-friendly string."""
        return f"[{self.role}] {self.content.strip()}"


def compose_system_prompt(descriptor: AgentDescriptor, bundles: Iterable[tuple[str, str]]) -> str:
    """Join the descriptor instructions with each ``(category, bundle)`` reference text."""

    parts = [descriptor.instructions.strip() or descriptor.description.strip()]
    for category, bundle in bundles:
        parts.append(f"{SECTION_RULE}\nReference material: {category}\n{SECTION_RULE}\n{bundle.strip()}")
    return "\n\n".join(parts)


def build_user_prompt(code: str, request: str | None = None, filename: str | None = None) -> str:
    name = filename or "<input>"
    ask = (request or "Review this code.").strip()
    return (
        f"{ask}\n\n"
        f"File: {name}\n"
        "```cpp\n"
        f"{code.rstrip()}\n"
        "```\n\n"
        "Return JSON: {\n"
        '  "summary": "<overall assessment>",\n'
        '  "findings": [\n'
        '    {"severity": "P0|P1|P2|P3", "file": "<file>", "line": <int or null>,'
        ' "issue": "<what is wrong>", "recommendation": "<how to fix>"}\n'
        "  ],\n"
        '  "clarifying_question": "<string if the request is too vague, else null>"\n'
        "}\n"
        "Only report issues present in the code above."
    )
