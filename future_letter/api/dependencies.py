"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Depends, Request

from future_letter.api.errors import LetterAPIError
from future_letter.config import Settings, load_settings
from future_letter.infrastructure.clients.llm import LLMClient
from future_letter.infrastructure.observability.metrics import rate_limited_counter, record_letter
from future_letter.infrastructure.stores.rate_limit import SlidingWindowRateLimiter
from future_letter.services.letter_composer import LetterComposer


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For entry, else the socket peer"""
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_settings() -> Settings:
    """Settings re-read per request"""
    return load_settings()


def get_rate_limiter(request: Request) -> SlidingWindowRateLimiter:
    return request.app.state.rate_limiter


def get_letter_composer(request: Request) -> LetterComposer:
    return request.app.state.letter_composer


def enforce_rate_limit(
    request: Request,
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
) -> None:
    """Reject the request with 429 once the client IP is over its window"""
    decision = limiter.check(get_client_ip(request))
    if not decision.allowed:
        rate_limited_counter.inc()
        record_letter("rate_limited")
        raise LetterAPIError(
            429,
            "rate_limited",
            "Too many requests. Please wait a minute and try again.",
            headers={"Retry-After": str(decision.retry_after)},
        )


def get_llm_client(app_settings: Settings = Depends(get_settings)) -> Optional[LLMClient]:
    """LLM client for the polish step, or None when polishing is off or no key is set"""
    api_key = app_settings.openai_api_key.strip()
    if not app_settings.polish_enabled or not api_key:
        return None
    return LLMClient(
        api_key=api_key,
        model=app_settings.resolved_model,
        base_url=app_settings.openai_base_url,
        timeout=app_settings.llm_timeout_seconds,
    )
