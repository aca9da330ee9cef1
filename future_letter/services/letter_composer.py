"""Letter composer - template letter with an optional, validated LLM polish"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from future_letter.domain.content import finalize_content, normalize_disclaimer, normalize_letter
from future_letter.domain.exceptions import LLMServiceError
from future_letter.domain.letter_rules import (
    compute_gap_severity,
    describe_letter_violations,
    within_content_budget,
)
from future_letter.domain.models import Goal, LetterContent, LetterInput, Projection
from future_letter.domain.template_letter import build_template_content, pick_template_variant
from future_letter.infrastructure.clients.llm import LLMClient, LLMError, LLMErrorKind
from future_letter.infrastructure.observability.logging import log_llm_error
from future_letter.infrastructure.observability.metrics import polish_counter
from future_letter.infrastructure.stores.memory import KeyValueStore
from future_letter.services.prompts import POLISH_SCHEMA, POLISH_SYSTEM_PROMPT, build_polish_prompt

logger = logging.getLogger(__name__)

# Lines the polish must leave untouched (0-based)
FIXED_LINE_INDEXES = (0, 3, 4, 5, 6)


class PolishedLetter(BaseModel):
    """Expected JSON shape of the polish response"""

    model_config = ConfigDict(extra="forbid")

    letter: str


@dataclass
class CompositionResult:
    content: LetterContent
    severity: int
    polish_result: str
    fallback: bool
    llm_ms: float = 0.0
    error: Optional[LLMError] = None


def build_cache_key(letter_input: LetterInput, variant: int, severity: int) -> str:
    """Coarse fingerprint of requests that would get the same base letter"""
    other_key = (letter_input.goal_other or "").strip() if letter_input.goal == Goal.OTHER else ""
    return ":".join(
        str(part)
        for part in (
            letter_input.age,
            letter_input.household_now,
            letter_input.kids_future,
            letter_input.goal.value,
            other_key,
            variant,
            severity,
        )
    )


def fixed_lines_unchanged(base_letter: str, polished_letter: str) -> bool:
    base_lines = base_letter.split("\n")
    polished_lines = polished_letter.split("\n")
    if len(base_lines) != len(polished_lines):
        return False
    return all(base_lines[i] == polished_lines[i] for i in FIXED_LINE_INDEXES)


class LetterComposer:
    """
    Build the letter content for one request.

    The template letter is always computed first and is the fallback for
    every failure. An LLM rewrite of lines 2-3 is accepted only when it
    passes every letter rule and leaves lines 1/4/5/6/7 untouched.
    Accepted rewrites are cached by request fingerprint.
    """

    def __init__(self, cache: KeyValueStore[str], polish_timeout_seconds: float = 2.0):
        self.cache = cache
        self.polish_timeout_seconds = polish_timeout_seconds

    async def compose(
        self,
        letter_input: LetterInput,
        projection: Projection,
        llm_client: Optional[LLMClient] = None,
        request_id: Optional[str] = None,
        strict: bool = False,
    ) -> CompositionResult:
        """
        Raises:
            LLMServiceError: upstream failure while strict is set
        """
        severity = compute_gap_severity(letter_input, projection)
        base = build_template_content(letter_input, projection, severity)
        base_letter = normalize_letter(base.letter)
        base.letter = base_letter

        if llm_client is None:
            result = CompositionResult(content=base, severity=severity, polish_result="skipped", fallback=False)
        else:
            result = await self._polish(letter_input, base, severity, llm_client, request_id, strict)

        polish_counter.labels(result=result.polish_result).inc()
        finalize_content(result.content, letter_input.goal, letter_input.goal_other, projection)
        return result

    async def _polish(
        self,
        letter_input: LetterInput,
        base: LetterContent,
        severity: int,
        llm_client: LLMClient,
        request_id: Optional[str],
        strict: bool,
    ) -> CompositionResult:
        cache_key = build_cache_key(letter_input, pick_template_variant(letter_input), severity)
        cached = self.cache.get(cache_key)
        if cached:
            content = _with_letter(base, normalize_letter(cached))
            return CompositionResult(content=content, severity=severity, polish_result="cached", fallback=False)

        prompt = build_polish_prompt(base.letter, severity)
        try:
            llm_result = await asyncio.wait_for(
                llm_client.generate_structured_json(POLISH_SYSTEM_PROMPT, prompt, POLISH_SCHEMA),
                timeout=self.polish_timeout_seconds,
            )
        except asyncio.TimeoutError:
            error = LLMError(
                kind=LLMErrorKind.TIMEOUT,
                model=llm_client.model,
                name="TimeoutError",
                detail=f"polish timed out after {self.polish_timeout_seconds}s",
            )
            return self._fail(base, severity, error, request_id, strict, "timeout", self.polish_timeout_seconds * 1000)

        if not llm_result.ok:
            result_label = "timeout" if llm_result.error.kind == LLMErrorKind.TIMEOUT else "failed"
            return self._fail(base, severity, llm_result.error, request_id, strict, result_label, llm_result.duration_ms)

        try:
            polished = PolishedLetter.model_validate_json(llm_result.raw_text)
        except ValidationError as e:
            error = LLMError(
                kind=LLMErrorKind.SCHEMA_INVALID,
                model=llm_client.model,
                name="ValidationError",
                detail=str(e)[:200],
            )
            return self._fail(base, severity, error, request_id, strict, "failed", llm_result.duration_ms)

        polished_letter = normalize_letter(polished.letter)
        candidate = _with_letter(base, polished_letter)
        candidate.disclaimer = normalize_disclaimer(candidate.disclaimer)
        violations = describe_letter_violations(polished_letter)
        if not fixed_lines_unchanged(base.letter, polished_letter):
            violations.append("fixed_line_changed")
        if not within_content_budget(candidate):
            violations.append("content_too_long")

        if violations:
            # Rule violations are a fallback case, never surfaced to the user
            logger.info(
                "Polish rejected",
                extra={"request_id": request_id, "violations": violations},
            )
            return CompositionResult(
                content=base,
                severity=severity,
                polish_result="rejected",
                fallback=True,
                llm_ms=llm_result.duration_ms,
            )

        self.cache.set(cache_key, polished_letter)
        return CompositionResult(
            content=candidate,
            severity=severity,
            polish_result="accepted",
            fallback=False,
            llm_ms=llm_result.duration_ms,
        )

    def _fail(
        self,
        base: LetterContent,
        severity: int,
        error: LLMError,
        request_id: Optional[str],
        strict: bool,
        result_label: str,
        llm_ms: float,
    ) -> CompositionResult:
        log_llm_error(request_id, error)
        if strict and error.kind != LLMErrorKind.SCHEMA_INVALID:
            raise LLMServiceError(error)
        return CompositionResult(
            content=base,
            severity=severity,
            polish_result=result_label,
            fallback=True,
            llm_ms=llm_ms,
            error=error,
        )


def _with_letter(base: LetterContent, letter: str) -> LetterContent:
    return LetterContent(
        letter=letter,
        plan_save=base.plan_save,
        plan_grow=base.plan_grow,
        plan_protect=base.plan_protect,
        cta=base.cta,
        summary=base.summary,
        disclaimer=base.disclaimer,
    )
