"""LLM client for structured JSON generation (OpenAI chat completions)"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx
import openai
from openai import AsyncOpenAI

from future_letter.config import settings
from future_letter.infrastructure.observability.metrics import llm_latency_histogram

logger = logging.getLogger(__name__)

DETAIL_MAX_CHARS = 200


class LLMErrorKind(str, Enum):
    TIMEOUT = "timeout"
    AUTH = "auth_error"
    ACCESS_DENIED = "access_denied"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_SERVER = "upstream_server_error"
    SCHEMA_INVALID = "schema_invalid"
    CONNECTION = "connection_error"
    UNKNOWN = "unknown"


def hint_for_status(status: Optional[int], upstream_code: Optional[str], model: str) -> str:
    """Operator-facing hint keyed on the upstream HTTP status"""
    if status == 401:
        return "Check OPENAI_API_KEY is valid and restart the server."
    if status in (403, 404) or upstream_code == "model_not_found":
        return f"Project may not have access to model {model}."
    if status == 429:
        return "Rate limit or quota exceeded; try again later."
    if status is not None and status >= 500:
        return "Upstream temporary issue; retry shortly."
    return "Likely local runtime/SDK error. See error.detail."


def _truncate(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    return str(text)[:DETAIL_MAX_CHARS]


@dataclass
class LLMError:
    """Diagnostics for a failed LLM call"""

    kind: LLMErrorKind
    model: str
    status: Optional[int] = None
    request_id: Optional[str] = None
    upstream_code: Optional[str] = None
    upstream_type: Optional[str] = None
    upstream_param: Optional[str] = None
    upstream_message: Optional[str] = None
    name: str = "Error"
    detail: Optional[str] = None

    @property
    def hint(self) -> str:
        return hint_for_status(self.status, self.upstream_code, self.model)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "status": self.status,
            "request_id": self.request_id,
            "upstream_code": self.upstream_code,
            "upstream_type": self.upstream_type,
            "upstream_param": self.upstream_param,
            "upstream_message": self.upstream_message,
            "name": self.name,
            "detail": self.detail,
            "model": self.model,
            "hint": self.hint,
        }


@dataclass
class LLMResult:
    """Either raw_text (success) or error"""

    raw_text: str = ""
    error: Optional[LLMError] = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


def error_from_exception(exc: Exception, model: str) -> LLMError:
    """Translate SDK / transport exceptions into a tagged LLMError"""
    name = type(exc).__name__
    detail = _truncate(str(exc))

    if isinstance(exc, (openai.APITimeoutError, httpx.TimeoutException)):
        return LLMError(kind=LLMErrorKind.TIMEOUT, model=model, name=name, detail=detail)

    if isinstance(exc, openai.APIStatusError):
        status = exc.status_code
        if status == 401:
            kind = LLMErrorKind.AUTH
        elif status in (403, 404) or exc.code == "model_not_found":
            kind = LLMErrorKind.ACCESS_DENIED
        elif status == 429:
            kind = LLMErrorKind.RATE_LIMITED
        elif status >= 500:
            kind = LLMErrorKind.UPSTREAM_SERVER
        else:
            kind = LLMErrorKind.UNKNOWN
        return LLMError(
            kind=kind,
            model=model,
            status=status,
            request_id=exc.request_id,
            upstream_code=exc.code,
            upstream_type=exc.type,
            upstream_param=exc.param,
            upstream_message=_truncate(exc.message),
            name=name,
            detail=detail,
        )

    if isinstance(exc, (openai.APIConnectionError, httpx.TransportError)):
        return LLMError(kind=LLMErrorKind.CONNECTION, model=model, name=name, detail=detail)

    return LLMError(kind=LLMErrorKind.UNKNOWN, model=model, name=name, detail=detail)


class LLMClient:
    """Client for an OpenAI-compatible chat completions endpoint"""

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model or settings.resolved_model
        self.base_url = base_url or settings.openai_base_url
        self.timeout = timeout or settings.llm_timeout_seconds
        self.transport = transport

    async def generate_structured_json(
        self,
        system: str,
        user: str,
        schema: Dict[str, Any],
        schema_name: str = "letter_from_future",
    ) -> LLMResult:
        """
        Single chat completion constrained to a strict JSON schema.

        Never raises for upstream failures: timeouts, HTTP errors and empty
        output come back as LLMResult.error. No retries.
        """
        start_time = time.time()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as http_client:
            client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                http_client=http_client,
                max_retries=0,
            )
            try:
                with llm_latency_histogram.time():
                    response = await client.chat.completions.create(
                        model=self.model,
                        messages=[
                            {"role": "system", "content": system},
                            {"role": "user", "content": user},
                        ],
                        response_format={
                            "type": "json_schema",
                            "json_schema": {"name": schema_name, "strict": True, "schema": schema},
                        },
                    )
            except (openai.OpenAIError, httpx.HTTPError) as e:
                error = error_from_exception(e, self.model)
                logger.warning("LLM call failed: %s (%s)", error.kind.value, error.detail)
                return LLMResult(error=error, duration_ms=(time.time() - start_time) * 1000)

        duration_ms = (time.time() - start_time) * 1000
        raw_text = ""
        if response.choices and response.choices[0].message:
            raw_text = response.choices[0].message.content or ""
        if not raw_text:
            return LLMResult(
                error=LLMError(
                    kind=LLMErrorKind.SCHEMA_INVALID,
                    model=self.model,
                    name="EmptyOutput",
                    detail="empty_output",
                ),
                duration_ms=duration_ms,
            )
        return LLMResult(raw_text=raw_text, duration_ms=duration_ms)
