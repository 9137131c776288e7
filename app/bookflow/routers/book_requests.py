from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.bookflow.core.deps import PageParams, get_page_params
from app.bookflow.db.models import SchoolInventoryRequest
from app.bookflow.db.session import get_db
from app.bookflow.repos.book_requests import BookRequestQueryFilters
from app.bookflow.schemas.book_requests import (
    BookRequestCreateRequest,
    BookRequestListResponse,
    BookRequestResponse,
    RequestStatus,
)
from app.bookflow.schemas.common import build_page_meta
from app.bookflow.schemas.errors import BookRequestErrorResponse, error_responses
from app.bookflow.services.book_requests import BookRequestService

router = APIRouter()

_ERROR_RESPONSES = error_responses(BookRequestErrorResponse, 400, 404)


def _request_response(request: SchoolInventoryRequest) -> BookRequestResponse:
    return BookRequestResponse(
        id=request.id,
        school_id=request.school_id,
        book_id=request.book_id,
        quantity=request.quantity,
        status=request.status,
        is_active=request.is_active,
        created_at=request.created_at,
        updated_at=request.updated_at,
        resolved_at=request.resolved_at,
    )


@router.get("/book-requests", response_model=BookRequestListResponse)
def list_book_requests(
    status: RequestStatus | None = Query(None),
    school_id: int | None = Query(None, ge=1),
    book_id: int | None = Query(None, ge=1),
    paging: PageParams = Depends(get_page_params),
    db=Depends(get_db),
):
    filters = BookRequestQueryFilters(status=status, school_id=school_id, book_id=book_id)
    rows, total = BookRequestService(db).list_requests(filters, paging.page, paging.page_size)
    return BookRequestListResponse(
        meta=build_page_meta(page=paging.page, page_size=paging.page_size, total=total),
        rows=[_request_response(row) for row in rows],
    )


@router.post("/book-requests", response_model=BookRequestResponse, status_code=201, responses=_ERROR_RESPONSES)
def create_book_request(payload: BookRequestCreateRequest, db=Depends(get_db)):
    request = BookRequestService(db).create_request(payload.school_id, payload.book_id, payload.quantity)
    return _request_response(request)


@router.get("/book-requests/{request_id}", response_model=BookRequestResponse, responses=_ERROR_RESPONSES)
def get_book_request(request_id: int, db=Depends(get_db)):
    return _request_response(BookRequestService(db).get_request(request_id))


@router.put("/book-requests/{request_id}/approve", response_model=BookRequestResponse, responses=_ERROR_RESPONSES)
def approve_book_request(request_id: int, db=Depends(get_db)):
    return _request_response(BookRequestService(db).approve_request(request_id))


@router.put("/book-requests/{request_id}/reject", response_model=BookRequestResponse, responses=_ERROR_RESPONSES)
def reject_book_request(request_id: int, db=Depends(get_db)):
    return _request_response(BookRequestService(db).reject_request(request_id))
