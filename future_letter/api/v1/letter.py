"""POST /v1/letter - letter from ten years ahead"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request

from future_letter.api.v1.schemas import LetterContentSchema, LetterRequest, LetterResponse, ProjectionSchema
from future_letter.api.dependencies import (
    enforce_rate_limit,
    get_letter_composer,
    get_llm_client,
    get_request_id,
    get_settings,
)
from future_letter.api.errors import LetterAPIError
from future_letter.config import Settings
from future_letter.domain.exceptions import LLMServiceError
from future_letter.domain.projections import compute_projections
from future_letter.infrastructure.clients.llm import LLMClient
from future_letter.infrastructure.observability.logging import log_letter
from future_letter.infrastructure.observability.metrics import record_letter
from future_letter.services.letter_composer import LetterComposer

router = APIRouter()


@router.post(
    "/letter",
    response_model=LetterResponse,
    dependencies=[Depends(enforce_rate_limit)],
)
async def create_letter(
    request_body: LetterRequest,
    request: Request,
    app_settings: Settings = Depends(get_settings),
    composer: LetterComposer = Depends(get_letter_composer),
    llm_client: Optional[LLMClient] = Depends(get_llm_client),
):
    """
    Generate the letter, plan copy and ten-year projection.

    Flow:
    1. Rate limit by client IP (3 requests / 60 s by default)
    2. Compute the projection
    3. Build the template letter and, if configured, polish lines 2-3
    4. Attach disclaimer, consultation memo and evidence
    """
    start_time = time.time()
    request_id = get_request_id(request)
    letter_input = request_body.to_domain()

    projections = compute_projections(letter_input)
    projection_payload = [ProjectionSchema.model_validate(p) for p in projections]

    if app_settings.polish_enabled and not app_settings.openai_api_key.strip():
        record_letter("missing_api_key")
        raise LetterAPIError(
            500,
            "missing_api_key",
            "OPENAI_API_KEY is not set.",
            projections=projection_payload,
            hint="Set OPENAI_API_KEY in .env and restart the server.",
        )

    try:
        result = await composer.compose(
            letter_input,
            projections[0],
            llm_client=llm_client,
            request_id=request_id,
            strict=app_settings.polish_strict,
        )
    except LLMServiceError as e:
        record_letter("llm_error")
        error = e.error
        raise LetterAPIError(
            502,
            "llm_error",
            "LLM request failed.",
            projections=projection_payload,
            status=error.status,
            name=error.name,
            request_id=error.request_id,
            upstream_message=error.upstream_message,
            upstream_code=error.upstream_code,
            upstream_type=error.upstream_type,
            upstream_param=error.upstream_param,
            model=error.model,
            detail=error.detail,
            hint=error.hint,
        )
    except Exception as e:
        record_letter("error")
        logging.error(
            "Letter generation failed",
            extra={"request_id": request_id, "error": str(e)},
            exc_info=True,
        )
        raise LetterAPIError(
            500,
            "internal_error",
            "Internal server error",
            projections=projection_payload,
        )

    record_letter("ok", result.severity)
    log_letter(
        request_id=request_id,
        goal=letter_input.goal.value,
        severity=result.severity,
        polish_result=result.polish_result,
        fallback=result.fallback,
        llm_ms=result.llm_ms,
        duration_ms=(time.time() - start_time) * 1000,
    )

    return LetterResponse(
        projections=projection_payload,
        content=LetterContentSchema.model_validate(result.content),
    )
