"""Agent-side helpers for reference-guided C/C++ reviews."""

from .agent import ReviewAgent, ReviewResult
from .core import ReviewMessage, build_user_prompt, compose_system_prompt
from .llm import (
    AnthropicReviewer,
    AzureOpenAIReviewer,
    LLMReview,
    OpenAIReviewer,
    ReviewBackend,
    ReviewFinding,
    build_reviewer_from_env,
)
from .report import ReviewReportEntry, ReviewReportReader, ReviewReportWriter

__all__ = [
    "ReviewAgent",
    "ReviewResult",
    "ReviewMessage",
    "compose_system_prompt",
    "build_user_prompt",
    "ReviewBackend",
    "LLMReview",
    "ReviewFinding",
    "OpenAIReviewer",
    "AzureOpenAIReviewer",
    "AnthropicReviewer",
    "build_reviewer_from_env",
    "ReviewReportEntry",
    "ReviewReportWriter",
    "ReviewReportReader",
]
