from fastapi import APIRouter, Depends

from app.bookflow.core.deps import PageParams, get_page_params
from app.bookflow.db.session import get_db
from app.bookflow.schemas.common import build_page_meta
from app.bookflow.schemas.errors import StockEntryErrorResponse, error_responses
from app.bookflow.schemas.stock import (
    StockEntryCreateRequest,
    StockEntryListResponse,
    StockEntryResponse,
    StockEntryUpdateRequest,
)
from app.bookflow.services.stock_entries import StockEntryService

router = APIRouter()

_ERROR_RESPONSES = error_responses(StockEntryErrorResponse, 400, 404, 409)


def _entry_response(entry) -> StockEntryResponse:
    return StockEntryResponse(
        id=entry.id,
        book_id=entry.book_id,
        quantity=entry.quantity,
        location=entry.location,
        is_active=entry.is_active,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )


@router.get("/stock-entries", response_model=StockEntryListResponse)
def list_stock_entries(paging: PageParams = Depends(get_page_params), db=Depends(get_db)):
    rows, total = StockEntryService(db).list_entries(paging.page, paging.page_size)
    return StockEntryListResponse(
        meta=build_page_meta(page=paging.page, page_size=paging.page_size, total=total),
        rows=[_entry_response(row) for row in rows],
    )


@router.post("/stock-entries", response_model=StockEntryResponse, status_code=201, responses=_ERROR_RESPONSES)
def create_stock_entry(payload: StockEntryCreateRequest, db=Depends(get_db)):
    entry = StockEntryService(db).record_entry(payload.book_id, payload.quantity, payload.location)
    return _entry_response(entry)


@router.put("/stock-entries/{entry_id}", response_model=StockEntryResponse, responses=_ERROR_RESPONSES)
def update_stock_entry(entry_id: int, payload: StockEntryUpdateRequest, db=Depends(get_db)):
    entry = StockEntryService(db).update_entry(entry_id, payload.quantity, payload.location)
    return _entry_response(entry)


@router.delete("/stock-entries/{entry_id}", response_model=StockEntryResponse, responses=_ERROR_RESPONSES)
def delete_stock_entry(entry_id: int, db=Depends(get_db)):
    return _entry_response(StockEntryService(db).delete_entry(entry_id))
