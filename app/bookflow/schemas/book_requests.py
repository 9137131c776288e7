from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.bookflow.schemas.common import PageMeta

RequestStatus = Literal["PENDING", "APPROVED", "REJECTED"]


class BookRequestCreateRequest(BaseModel):
    school_id: int = Field(ge=1)
    book_id: int = Field(ge=1)
    quantity: int = Field(ge=1, examples=[25])


class BookRequestResponse(BaseModel):
    id: int
    school_id: int
    book_id: int
    quantity: int
    status: RequestStatus
    is_active: bool
    created_at: datetime
    updated_at: datetime | None
    resolved_at: datetime | None


class BookRequestListResponse(BaseModel):
    meta: PageMeta
    rows: list[BookRequestResponse]
