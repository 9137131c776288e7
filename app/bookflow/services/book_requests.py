from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from app.bookflow.core.config import settings
from app.bookflow.core.error_catalog import (
    AppError,
    BookNotFoundError,
    DuplicateRequestError,
    ErrorCatalog,
    InsufficientStockError,
    RequestNotFoundError,
    RequestNotPendingError,
    SchoolNotApprovedError,
    SchoolNotFoundError,
)
from app.bookflow.core.logging import log_json
from app.bookflow.core.metrics import metrics
from app.bookflow.db.models import (
    REQUEST_STATUS_APPROVED,
    REQUEST_STATUS_PENDING,
    REQUEST_STATUS_REJECTED,
    SchoolInventoryRequest,
)
from app.bookflow.repos.book_requests import BookRequestQueryFilters, BookRequestRepository
from app.bookflow.repos.catalog import CatalogRepository
from app.bookflow.repos.stock import StockRepository

logger = logging.getLogger(__name__)


class BookRequestService:
    """Book request lifecycle: PENDING -> APPROVED | REJECTED.

    Approval moves the requested quantity from the warehouse ledger to the
    school ledger. The status flip, the warehouse decrement and the school
    upsert are each guarded by the database and commit together or not at all.
    """

    def __init__(self, db):
        self.db = db
        self.requests = BookRequestRepository(db)
        self.stock = StockRepository(db)
        self.catalog = CatalogRepository(db)

    def get_request(self, request_id: int) -> SchoolInventoryRequest:
        request = self.requests.get_request(request_id)
        if request is None:
            raise RequestNotFoundError(request_id)
        return request

    def list_requests(
        self,
        filters: BookRequestQueryFilters,
        page: int,
        page_size: int,
    ) -> tuple[list[SchoolInventoryRequest], int]:
        return self.requests.list_requests(filters, page=page, page_size=page_size)

    def create_request(self, school_id: int, book_id: int, quantity: int) -> SchoolInventoryRequest:
        try:
            request = self._create_request(school_id, book_id, quantity)
        except AppError as exc:
            metrics.record_book_request_transition("create", exc.error.code.lower())
            raise
        metrics.record_book_request_transition("create", "ok")
        log_json(
            logger,
            {
                "event": "book_request.create",
                "request_id": request.id,
                "school_id": school_id,
                "book_id": book_id,
                "quantity": quantity,
            },
        )
        return request

    def _create_request(self, school_id: int, book_id: int, quantity: int) -> SchoolInventoryRequest:
        if quantity < 1:
            raise AppError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"message": "quantity must be at least 1", "quantity": quantity},
            )
        if self.catalog.get_book(book_id) is None:
            raise BookNotFoundError(book_id)
        if settings.BOOK_REQUESTS_REQUIRE_APPROVED_SCHOOL:
            school = self.catalog.get_school(school_id)
            if school is None:
                raise SchoolNotFoundError(school_id)
            if not school.is_approved:
                raise SchoolNotApprovedError(school_id)

        existing = self.requests.find_open_request(school_id, book_id)
        if existing is not None:
            raise DuplicateRequestError(school_id, book_id, existing.id)

        request = SchoolInventoryRequest(
            school_id=school_id,
            book_id=book_id,
            quantity=quantity,
            status=REQUEST_STATUS_PENDING,
            is_active=True,
        )
        try:
            self.requests.add(request)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            # Lost a race against a concurrent create; the partial unique index caught it.
            winner = self.requests.find_open_request(school_id, book_id)
            if winner is not None:
                raise DuplicateRequestError(school_id, book_id, winner.id) from exc
            if self.catalog.get_school(school_id) is None:
                raise SchoolNotFoundError(school_id) from exc
            raise
        except Exception:
            self.db.rollback()
            raise
        return request

    def approve_request(self, request_id: int) -> SchoolInventoryRequest:
        try:
            request = self._approve_request(request_id)
        except AppError as exc:
            metrics.record_book_request_transition("approve", exc.error.code.lower())
            raise
        metrics.record_book_request_transition("approve", "ok")
        log_json(
            logger,
            {
                "event": "book_request.approve",
                "request_id": request.id,
                "school_id": request.school_id,
                "book_id": request.book_id,
                "quantity": request.quantity,
            },
        )
        return request

    def _approve_request(self, request_id: int) -> SchoolInventoryRequest:
        request = self._load_pending(request_id)
        school_id, book_id, quantity = request.school_id, request.book_id, request.quantity

        warehouse = self.stock.get_warehouse_stock(book_id)
        available = warehouse.quantity if warehouse is not None and warehouse.is_active else 0
        if available < quantity:
            raise InsufficientStockError(book_id, quantity, available)

        try:
            if not self.requests.transition_status(
                request_id, from_status=REQUEST_STATUS_PENDING, to_status=REQUEST_STATUS_APPROVED
            ):
                raise RequestNotPendingError(request_id, self.requests.get_status(request_id))
            # The read above may be stale; the guarded decrement is authoritative.
            if not self.stock.decrement_warehouse(book_id, quantity):
                raise InsufficientStockError(book_id, quantity, self.stock.get_warehouse_quantity(book_id))
            self.stock.upsert_school_stock(school_id, book_id, quantity)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(request)
        return request

    def reject_request(self, request_id: int) -> SchoolInventoryRequest:
        try:
            request = self._reject_request(request_id)
        except AppError as exc:
            metrics.record_book_request_transition("reject", exc.error.code.lower())
            raise
        metrics.record_book_request_transition("reject", "ok")
        log_json(
            logger,
            {
                "event": "book_request.reject",
                "request_id": request.id,
                "school_id": request.school_id,
                "book_id": request.book_id,
            },
        )
        return request

    def _reject_request(self, request_id: int) -> SchoolInventoryRequest:
        request = self._load_pending(request_id)
        try:
            if not self.requests.transition_status(
                request_id, from_status=REQUEST_STATUS_PENDING, to_status=REQUEST_STATUS_REJECTED
            ):
                raise RequestNotPendingError(request_id, self.requests.get_status(request_id))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(request)
        return request

    def _load_pending(self, request_id: int) -> SchoolInventoryRequest:
        request = self.get_request(request_id)
        if request.status != REQUEST_STATUS_PENDING:
            raise RequestNotPendingError(request_id, request.status)
        return request
