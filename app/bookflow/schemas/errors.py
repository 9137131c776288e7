from typing import Annotated

from pydantic import BaseModel, Field


class ErrorEnvelope(BaseModel):
    """Body of every non-2xx response produced by the exception handlers."""

    code: str = Field(examples=["REQUEST_NOT_FOUND"])
    message: str
    details: dict | None = None
    trace_id: str | None = None


class RequestStateDetails(BaseModel):
    request_id: int
    status: str | None = None


class StockShortfallDetails(BaseModel):
    book_id: int
    requested: int
    available: int | None = None


class OpenRequestDetails(BaseModel):
    school_id: int
    book_id: int
    existing_request_id: int | None = None


# Models are tried in order; anything else stays a plain mapping.
BookRequestDetails = Annotated[
    StockShortfallDetails | OpenRequestDetails | RequestStateDetails | dict,
    Field(union_mode="left_to_right"),
]


class BookRequestErrorResponse(ErrorEnvelope):
    details: BookRequestDetails | None = None


class StockEntryErrorResponse(ErrorEnvelope):
    details: Annotated[StockShortfallDetails | dict, Field(union_mode="left_to_right")] | None = None


class FieldError(BaseModel):
    field: str | None = None
    message: str
    type: str
    loc: list[str | int] | None = None
    input: object | None = None
    ctx: dict | None = None


class FieldErrorDetails(BaseModel):
    errors: list[FieldError]


class ValidationErrorResponse(ErrorEnvelope):
    code: str = Field("VALIDATION_ERROR", examples=["VALIDATION_ERROR"])
    details: FieldErrorDetails | dict | None = None


def error_responses(model: type[ErrorEnvelope], *status_codes: int) -> dict[int, dict]:
    """OpenAPI ``responses`` for a route: business errors plus the 422 validation body."""
    responses: dict[int, dict] = {code: {"model": model} for code in status_codes}
    responses[422] = {"model": ValidationErrorResponse}
    return responses
