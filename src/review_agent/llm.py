"""LLM-backed review backends with multi-provider support."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Protocol

from anthropic import Anthropic
from dotenv import load_dotenv
from openai import AzureOpenAI, OpenAI
from pydantic import BaseModel, Field, ValidationError

from review_refs import Severity

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-5.1-mini"
DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5"
DEFAULT_AZURE_API_VERSION = "2024-05-01-preview"
ANTHROPIC_MAX_TOKENS = 4096


class FindingModel(BaseModel):
    severity: Severity
    issue: str
    recommendation: str
    file: str | None = None
    line: int | None = Field(default=None, ge=1)


class ReviewResponseModel(BaseModel):
    summary: str = ""
    findings: list[FindingModel] = Field(default_factory=list)
    clarifying_question: str | None = None


@dataclass(frozen=True)
class ReviewFinding:
    severity: Severity
    issue: str
    recommendation: str
    file: str | None = None
    line: int | None = None


@dataclass(frozen=True)
class LLMReview:
    """Structured output from an LLM review backend."""

    summary: str
    findings: list[ReviewFinding] = field(default_factory=list)
    clarifying_question: str | None = None
    conversation_history: list[dict[str, str]] = field(default_factory=list)


class ReviewBackend(Protocol):
    """Protocol for review backends."""

    def review(  # pragma: no cover - interface
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        conversation_history: list[dict[str, str]] | None = None,
    ) -> LLMReview:
        ...


def _normalize_history_for_model(
    conversation_history: list[dict[str, str]] | None,
) -> list[dict[str, str]]:
    """
    Convert external conversation roles to the roles expected by provider SDKs.
    External format uses 'AI' for assistant responses; system entries are dropped;
    the system prompt is rebuilt from the references on every call.
    """
    if not conversation_history:
        return []
    normalized: list[dict[str, str]] = []
    for msg in conversation_history:
        role = msg.get("role", "").lower()
        if role == "system":
            continue
        provider_role = "assistant" if role in ("ai", "assistant") else "user"
        normalized.append({"role": provider_role, "content": msg.get("content", "")})
    return normalized


def _build_messages(
    system_prompt: str,
    user_prompt: str,
    conversation_history: list[dict[str, str]] | None = None,
) -> list[dict[str, str]]:
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend(_normalize_history_for_model(conversation_history))
    messages.append({"role": "user", "content": user_prompt})
    return messages


def _build_external_history(
    messages: list[dict[str, str]],
    assistant_content: str,
) -> list[dict[str, str]]:
    """Map provider roles back to external history format with 'AI' assistant entries."""
    external = [
        {"role": "AI" if msg.get("role") == "assistant" else msg.get("role", ""), "content": msg.get("content", "")}
        for msg in messages
    ]
    external.append({"role": "AI", "content": assistant_content})
    return external


def _parse_review_payload(content: str | None) -> LLMReview:
    if not content or not content.strip():
        raise ValueError("Review response is empty")
    try:
        response = ReviewResponseModel.model_validate_json(content)
    except ValidationError as exc:
        raise ValueError(f"Review response is invalid: {exc}") from exc

    findings = [
        ReviewFinding(
            severity=finding.severity,
            issue=finding.issue,
            recommendation=finding.recommendation,
            file=finding.file,
            line=finding.line,
        )
        for finding in response.findings
    ]
    return LLMReview(
        summary=response.summary.strip(),
        findings=findings,
        clarifying_question=response.clarifying_question,
    )


def _with_history(parsed: LLMReview, history: list[dict[str, str]]) -> LLMReview:
    return LLMReview(
        summary=parsed.summary,
        findings=parsed.findings,
        clarifying_question=parsed.clarifying_question,
        conversation_history=history,
    )


class OpenAIReviewer(ReviewBackend):
    """Review backend that calls OpenAI chat completions in JSON mode."""

    def __init__(self, model: str | None = None, client: OpenAI | None = None) -> None:
        if client is None:
            api_key = os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise EnvironmentError(
                    "OPENAI_API_KEY is not set. Add it to your environment or a .env file."
                )
            client = OpenAI(api_key=api_key)

        self._client = client
        self._model = model or os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL)

    def review(  # noqa: D401
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        conversation_history: list[dict[str, str]] | None = None,
    ) -> LLMReview:
        messages = _build_messages(system_prompt, user_prompt, conversation_history)
        logger.debug("Requesting OpenAI review with model %s (%d messages)", self._model, len(messages))
        response = self._client.chat.completions.create(
            model=self._model,
            response_format={"type": "json_object"},
            messages=messages,
        )
        content = response.choices[0].message.content
        return _with_history(_parse_review_payload(content), _build_external_history(messages, content or ""))


class AzureOpenAIReviewer(ReviewBackend):
    """Review backend for a standard Azure OpenAI resource."""

    def __init__(self, deployment: str | None = None, client: AzureOpenAI | None = None) -> None:
        deployment = deployment or os.getenv("AZURE_OPENAI_DEPLOYMENT")
        if client is None:
            api_key = os.getenv("AZURE_OPENAI_API_KEY")
            endpoint = os.getenv("AZURE_OPENAI_ENDPOINT")
            api_version = os.getenv("AZURE_OPENAI_API_VERSION", DEFAULT_AZURE_API_VERSION)
            if not all([api_key, endpoint, deployment]):
                raise EnvironmentError("Azure OpenAI configuration is incomplete")
            client = AzureOpenAI(api_key=api_key, azure_endpoint=endpoint, api_version=api_version)
        if not deployment:
            raise EnvironmentError("AZURE_OPENAI_DEPLOYMENT is not set")

        self._client = client
        self._deployment = deployment

    def review(  # noqa: D401
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        conversation_history: list[dict[str, str]] | None = None,
    ) -> LLMReview:
        messages = _build_messages(system_prompt, user_prompt, conversation_history)
        logger.debug("Requesting Azure OpenAI review from deployment %s", self._deployment)
        response = self._client.chat.completions.create(
            model=self._deployment,
            response_format={"type": "json_object"},
            messages=messages,
        )
        content = response.choices[0].message.content
        return _with_history(_parse_review_payload(content), _build_external_history(messages, content or ""))


class AnthropicReviewer(ReviewBackend):
    """Review backend backed by the Anthropic Messages API."""

    def __init__(self, model: str | None = None, client: Anthropic | None = None) -> None:
        if client is None:
            api_key = os.getenv("ANTHROPIC_API_KEY")
            if not api_key:
                raise EnvironmentError(
                    "ANTHROPIC_API_KEY is not set. Add it to your environment or a .env file."
                )
            client = Anthropic(api_key=api_key)

        self._client = client
        self._model = model or os.getenv("ANTHROPIC_MODEL", DEFAULT_ANTHROPIC_MODEL)

    def review(  # noqa: D401
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        conversation_history: list[dict[str, str]] | None = None,
    ) -> LLMReview:
        messages = _build_messages(system_prompt, user_prompt, conversation_history)
        logger.debug("Requesting Anthropic review with model %s", self._model)
        # system prompt travels separately in the Messages API
        response = self._client.messages.create(
            model=self._model,
            max_tokens=ANTHROPIC_MAX_TOKENS,
            system=system_prompt,
            messages=messages[1:],
        )
        content = "".join(block.text for block in response.content if getattr(block, "type", "") == "text")
        return _with_history(_parse_review_payload(_extract_json(content)), _build_external_history(messages, content))


def _extract_json(content: str) -> str:
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end < start:
        return content
    return content[start : end + 1]


def build_reviewer_from_env(model: str | None = None) -> ReviewBackend:
    """Pick a backend from ``LLM_PROVIDER``; ``model`` is ignored by Azure, which routes by deployment."""
    provider = (os.getenv("LLM_PROVIDER") or "openai").lower()

    if provider == "openai":
        return OpenAIReviewer(model=model)
    if provider == "azure_openai":
        return AzureOpenAIReviewer()
    if provider == "claude":
        return AnthropicReviewer(model=model)

    raise ValueError("Unsupported LLM_PROVIDER. Expected one of: openai, azure_openai, claude.")
