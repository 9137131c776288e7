from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.bookflow.core.deps import PageParams, get_page_params
from app.bookflow.db.session import get_db
from app.bookflow.repos.stock import StockRepository, WarehouseQueryFilters
from app.bookflow.schemas.common import build_page_meta
from app.bookflow.schemas.errors import ErrorEnvelope, error_responses
from app.bookflow.schemas.stock import (
    SchoolStockListResponse,
    SchoolStockRow,
    StockBookSnapshot,
    WarehouseStockListResponse,
    WarehouseStockRow,
)
from app.bookflow.services.catalog import CatalogService

router = APIRouter()


def _book_snapshot(book) -> StockBookSnapshot | None:
    if book is None:
        return None
    return StockBookSnapshot(id=book.id, isbn=book.isbn, title=book.title, publisher=book.publisher)


@router.get("/inventory/warehouse", response_model=WarehouseStockListResponse)
def list_warehouse_stock(
    q: str | None = Query(None, description="Matches book title or ISBN"),
    paging: PageParams = Depends(get_page_params),
    db=Depends(get_db),
):
    rows, total = StockRepository(db).list_warehouse_stock(
        WarehouseQueryFilters(q=q),
        page=paging.page,
        page_size=paging.page_size,
    )
    return WarehouseStockListResponse(
        meta=build_page_meta(page=paging.page, page_size=paging.page_size, total=total),
        rows=[
            WarehouseStockRow(
                id=row.id,
                book_id=row.book_id,
                quantity=row.quantity,
                book=_book_snapshot(row.book),
                created_at=row.created_at,
                updated_at=row.updated_at,
            )
            for row in rows
        ],
    )


@router.get(
    "/inventory/schools/{school_id}",
    response_model=SchoolStockListResponse,
    responses=error_responses(ErrorEnvelope, 404),
)
def list_school_stock(
    school_id: int,
    paging: PageParams = Depends(get_page_params),
    db=Depends(get_db),
):
    CatalogService(db).get_school(school_id)
    rows, total = StockRepository(db).list_school_stock(school_id, page=paging.page, page_size=paging.page_size)
    return SchoolStockListResponse(
        meta=build_page_meta(page=paging.page, page_size=paging.page_size, total=total),
        rows=[
            SchoolStockRow(
                id=row.id,
                school_id=row.school_id,
                book_id=row.book_id,
                quantity=row.quantity,
                book=_book_snapshot(row.book),
                created_at=row.created_at,
                updated_at=row.updated_at,
            )
            for row in rows
        ],
    )
