from datetime import datetime

from pydantic import BaseModel, Field

from app.bookflow.schemas.common import PageMeta


class StockBookSnapshot(BaseModel):
    id: int
    isbn: str
    title: str
    publisher: str


class WarehouseStockRow(BaseModel):
    id: int
    book_id: int
    quantity: int
    book: StockBookSnapshot | None
    created_at: datetime
    updated_at: datetime | None


class SchoolStockRow(BaseModel):
    id: int
    school_id: int
    book_id: int
    quantity: int
    book: StockBookSnapshot | None
    created_at: datetime
    updated_at: datetime | None


class WarehouseStockListResponse(BaseModel):
    meta: PageMeta
    rows: list[WarehouseStockRow]


class SchoolStockListResponse(BaseModel):
    meta: PageMeta
    rows: list[SchoolStockRow]


class StockEntryCreateRequest(BaseModel):
    book_id: int = Field(ge=1)
    quantity: int = Field(ge=1, examples=[100])
    location: str = Field(min_length=1, max_length=255, examples=["Main warehouse"])


class StockEntryUpdateRequest(BaseModel):
    quantity: int = Field(ge=1, examples=[80])
    location: str = Field(min_length=1, max_length=255, examples=["Overflow shelf"])


class StockEntryResponse(BaseModel):
    id: int
    book_id: int
    quantity: int
    location: str
    is_active: bool
    created_at: datetime
    updated_at: datetime | None


class StockEntryListResponse(BaseModel):
    meta: PageMeta
    rows: list[StockEntryResponse]
