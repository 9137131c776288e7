from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer, WithJsonSchema

from app.bookflow.schemas.common import PageMeta


PriceValue = Annotated[
    Decimal,
    Field(ge=0, max_digits=10, decimal_places=2),
    PlainSerializer(lambda value: format(value.quantize(Decimal("0.01")), "f"), return_type=str, when_used="json"),
    WithJsonSchema({"type": "string", "pattern": r"^\d{1,8}(?:\.\d{2})?$"}, mode="serialization"),
]


class AuthorCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    biography: str | None = None


class AuthorSummary(BaseModel):
    id: int
    name: str


class AuthorResponse(BaseModel):
    id: int
    name: str
    biography: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None


class AuthorListResponse(BaseModel):
    meta: PageMeta
    rows: list[AuthorResponse]


class BookCreateRequest(BaseModel):
    isbn: str = Field(min_length=1, max_length=32)
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: PriceValue = Field(examples=["499.99"])
    publisher: str = Field(min_length=1, max_length=255)
    author_ids: list[int] = Field(default_factory=list)


class BookResponse(BaseModel):
    id: int
    isbn: str
    title: str
    description: str | None
    price: PriceValue
    publisher: str
    authors: list[AuthorSummary] = Field(default_factory=list)
    is_active: bool
    created_at: datetime
    updated_at: datetime | None


class BookListResponse(BaseModel):
    meta: PageMeta
    rows: list[BookResponse]


class SchoolCreateRequest(BaseModel):
    school_name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=255)
    contact_person: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=255)


class SchoolResponse(BaseModel):
    id: int
    school_name: str
    address: str
    contact_person: str
    phone: str
    email: str
    is_approved: bool
    created_at: datetime
    updated_at: datetime | None


class SchoolListResponse(BaseModel):
    meta: PageMeta
    rows: list[SchoolResponse]
