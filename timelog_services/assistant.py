"""
timelog_services.assistant -- Generative text assistance with fallbacks.

Responsibility:
    Polishes activity descriptions, suggests a category for a task title,
    and writes the executive summary of a period report.

Architecture position:
    Services -- external collaborator wrapper.  The only module that talks
    to the generative text API.

Invariants enforced:
    - Fallback contract: no method ever raises.  On any transport, HTTP or
      payload failure the caller gets its own input back (``enhance``),
      ``ActivityCategory.OTHER`` (``classify``) or a canned sentence
      (``summarize``).
    - ``classify`` only ever returns one of the six fixed categories.

Failure modes:
    - None surface to callers; failures are logged at WARNING with the
      operation name and exception type.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

import requests

from timelog_config.schema import AssistantSettings
from timelog_kernel.domain.values import Activity, ActivityCategory
from timelog_kernel.logging_config import get_logger

logger = get_logger("services.assistant")

DEFAULT_COMPANY = "Wheels & Keys"

SUMMARY_EMPTY_FALLBACK = "Work period successfully completed and logged."
SUMMARY_FAILURE_FALLBACK = "Summary generated automatically based on logged hours."


class TextAssistant(ABC):
    """Capability interface for the generative text service."""

    @abstractmethod
    def enhance(self, task: str, draft: str) -> str:
        """Return a professional rewrite of ``draft`` (or ``draft`` itself)."""
        ...

    @abstractmethod
    def classify(self, task: str) -> ActivityCategory:
        """Return the best-fitting category for a task title."""
        ...

    @abstractmethod
    def summarize(self, activities: Iterable[Activity]) -> str:
        """Return a 2-3 sentence summary of a period's work."""
        ...


class OfflineAssistant(TextAssistant):
    """Assistant used when the text service is disabled or has no key."""

    def enhance(self, task: str, draft: str) -> str:
        return draft

    def classify(self, task: str) -> ActivityCategory:
        return ActivityCategory.OTHER

    def summarize(self, activities: Iterable[Activity]) -> str:
        return SUMMARY_FAILURE_FALLBACK


class GeminiAssistant(TextAssistant):
    """
    Assistant backed by the Generative Language REST API.

    Args:
        settings: Model, endpoint, timeout and sampling parameters.
        api_key: Key sent in the ``x-goog-api-key`` header.
        company: Company name used in the prompts.
        session: Optional ``requests.Session`` (tests inject a fake).
    """

    def __init__(
        self,
        settings: AssistantSettings,
        api_key: str,
        company: str = DEFAULT_COMPANY,
        session: requests.Session | None = None,
    ):
        self._settings = settings
        self._company = company
        self._session = session or requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "x-goog-api-key": api_key,
        })

    @property
    def endpoint(self) -> str:
        base = self._settings.base_url.rstrip("/")
        return f"{base}/models/{self._settings.model}:generateContent"

    def _generate(
        self,
        operation: str,
        prompt: str,
        generation_config: Mapping[str, Any] | None = None,
    ) -> str | None:
        """Call the model; None means the call failed, "" means no text."""
        body: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if generation_config:
            body["generationConfig"] = dict(generation_config)

        try:
            response = self._session.post(
                self.endpoint, json=body, timeout=self._settings.timeout_seconds
            )
            response.raise_for_status()
            payload = response.json()
            candidates = payload.get("candidates") or []
            if not candidates:
                return ""
            parts = (candidates[0].get("content") or {}).get("parts") or []
            return "".join(part.get("text", "") for part in parts).strip()
        except (requests.exceptions.RequestException, ValueError, AttributeError, TypeError) as exc:
            logger.warning(
                "assistant_call_failed",
                extra={
                    "operation": operation,
                    "model": self._settings.model,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return None

    def enhance(self, task: str, draft: str) -> str:
        prompt = (
            f'You are an expert operations assistant for "{self._company}", an '
            "automotive locksmith and security firm.\n"
            "Professionalize this activity log for HR payroll.\n\n"
            f"Task: {task}\n"
            f"Draft: {draft}\n\n"
            "Output ONLY the refined description."
        )
        text = self._generate(
            "enhance",
            prompt,
            {
                "temperature": float(self._settings.enhance_temperature),
                "maxOutputTokens": self._settings.enhance_max_tokens,
                "thinkingConfig": {
                    "thinkingBudget": self._settings.enhance_thinking_budget,
                },
            },
        )
        return text or draft

    def classify(self, task: str) -> ActivityCategory:
        names = ", ".join(c.value for c in ActivityCategory)
        prompt = (
            f'Based on this task title: "{task}", which category from this list '
            f"fits best: {names}?\n"
            "Return ONLY the category name."
        )
        text = self._generate(
            "classify",
            prompt,
            {
                "temperature": float(self._settings.classify_temperature),
                "maxOutputTokens": self._settings.classify_max_tokens,
            },
        )
        category = ActivityCategory.parse(text)
        if category is None:
            logger.info(
                "assistant_category_unrecognized",
                extra={"response": text},
            )
            return ActivityCategory.OTHER
        return category

    def summarize(self, activities: Iterable[Activity]) -> str:
        data = "\n".join(
            f"{a.category.value}: {a.task} ({a.duration_hours}h)" for a in activities
        )
        prompt = (
            f'Summarize this payroll period\'s work for "{self._company}" staff. '
            "Create a professional, punchy summary of major accomplishments.\n\n"
            f"Activities:\n{data}\n\n"
            "Output 2-3 sentences max."
        )
        text = self._generate("summarize", prompt)
        if text is None:
            return SUMMARY_FAILURE_FALLBACK
        return text or SUMMARY_EMPTY_FALLBACK


def build_assistant(
    settings: AssistantSettings,
    company: str = DEFAULT_COMPANY,
    environ: Mapping[str, str] | None = None,
    session: requests.Session | None = None,
) -> TextAssistant:
    """Pick the assistant implementation the configuration allows."""
    environ = os.environ if environ is None else environ
    api_key = environ.get(settings.api_key_env, "")
    if not settings.enabled or not api_key:
        logger.info(
            "assistant_offline",
            extra={"enabled": settings.enabled, "api_key_env": settings.api_key_env},
        )
        return OfflineAssistant()
    return GeminiAssistant(settings, api_key, company=company, session=session)
