"""Error envelope and exception handlers"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from future_letter.api.v1.schemas import FIELD_RANGES, ErrorDetail, ErrorResponse, ProjectionSchema
from future_letter.infrastructure.observability.metrics import record_letter

logger = logging.getLogger(__name__)

# Pydantic error types reported as a non-integer field
_TYPE_ERRORS = {
    "missing",
    "int_type",
    "int_parsing",
    "int_from_float",
    "int_parsing_size",
    "finite_number",
}
_RANGE_ERRORS = {"greater_than_equal", "less_than_equal"}


class LetterAPIError(Exception):
    """Error that maps directly onto the {ok: false, error: {...}} envelope"""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        projections: Optional[List[ProjectionSchema]] = None,
        headers: Optional[Dict[str, str]] = None,
        **diagnostics: Any,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.projections = projections
        self.headers = headers
        self.diagnostics = diagnostics


def error_response(
    status_code: int,
    code: str,
    message: str,
    projections: Optional[List[ProjectionSchema]] = None,
    headers: Optional[Dict[str, str]] = None,
    **diagnostics: Any,
) -> JSONResponse:
    body = ErrorResponse(
        projections=projections,
        error=ErrorDetail(message=message, code=code, **diagnostics),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def _field_name(loc: Sequence[Any]) -> Optional[str]:
    # Body errors come as ("body", <field>, ...)
    if len(loc) >= 2 and loc[0] == "body" and isinstance(loc[1], str):
        return loc[1]
    return None


def classify_validation_error(errors: Sequence[Mapping[str, Any]]) -> Tuple[str, str]:
    """Map the first pydantic error onto (code, message)"""
    if not errors:
        return "invalid_body", "JSON body is required."
    error = errors[0]
    error_type = error.get("type", "")
    field = _field_name(error.get("loc", ()))

    if error_type == "json_invalid":
        return "invalid_json", "Invalid JSON body."
    if error_type == "invalid_goal_other" or field == "goal_other":
        return "invalid_goal_other", error.get("msg", "goal_other is invalid.")
    if field is None:
        return "invalid_body", "JSON body is required."
    if field == "goal":
        return "invalid_goal", "goal must be a valid option."
    if error_type in _RANGE_ERRORS and field in FIELD_RANGES:
        low, high = FIELD_RANGES[field]
        return "out_of_range", f"{field} must be between {low} and {high}."
    if error_type in _TYPE_ERRORS:
        return "invalid_type", f"{field} must be an integer."
    return "invalid_body", error.get("msg", "Invalid request body.")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        code, message = classify_validation_error(exc.errors())
        record_letter("invalid")
        logger.info(
            "Request rejected",
            extra={"request_id": getattr(request.state, "request_id", None), "code": code},
        )
        return error_response(400, code, message)

    @app.exception_handler(LetterAPIError)
    async def letter_api_error_handler(request: Request, exc: LetterAPIError):
        return error_response(
            exc.status_code,
            exc.code,
            exc.message,
            projections=exc.projections,
            headers=exc.headers,
            **exc.diagnostics,
        )
