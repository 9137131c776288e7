from __future__ import annotations

import logging

from app.bookflow.core.error_catalog import (
    AppError,
    BookNotFoundError,
    ErrorCatalog,
    InsufficientStockError,
    StockEntryNotFoundError,
)
from app.bookflow.core.logging import log_json
from app.bookflow.db.models import StockEntry
from app.bookflow.repos.catalog import CatalogRepository
from app.bookflow.repos.stock import StockRepository

logger = logging.getLogger(__name__)


def _validate_entry(quantity: int, location: str) -> None:
    if quantity < 1:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"message": "quantity must be at least 1", "quantity": quantity},
        )
    if not location or not location.strip():
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"message": "location must not be empty", "location": location},
        )


class StockEntryService:
    def __init__(self, db):
        self.db = db
        self.stock = StockRepository(db)
        self.catalog = CatalogRepository(db)

    def _get_entry(self, entry_id: int) -> StockEntry:
        entry = self.stock.get_entry(entry_id)
        if entry is None:
            raise StockEntryNotFoundError(entry_id)
        return entry

    def _debit_warehouse(self, book_id: int, quantity: int) -> None:
        if not self.stock.decrement_warehouse(book_id, quantity):
            raise InsufficientStockError(book_id, quantity, self.stock.get_warehouse_quantity(book_id))

    def record_entry(self, book_id: int, quantity: int, location: str) -> StockEntry:
        """Record received copies and credit the warehouse ledger in one commit."""
        _validate_entry(quantity, location)
        if self.catalog.get_book(book_id) is None:
            raise BookNotFoundError(book_id)

        entry = StockEntry(book_id=book_id, quantity=quantity, location=location, is_active=True)
        try:
            self.stock.add_entry(entry)
            self.stock.increment_warehouse(book_id, quantity)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(entry)
        log_json(
            logger,
            {
                "event": "stock_entry.record",
                "stock_entry_id": entry.id,
                "book_id": book_id,
                "quantity": quantity,
                "location": location,
            },
        )
        return entry

    def update_entry(self, entry_id: int, quantity: int, location: str) -> StockEntry:
        """Correct an entry and move the warehouse by the difference.

        Lowering an entry below what is still in the warehouse fails with
        InsufficientStockError and leaves both the entry and the ledger as they were.
        """
        _validate_entry(quantity, location)
        entry = self._get_entry(entry_id)
        book_id = entry.book_id
        previous = entry.quantity
        delta = quantity - previous

        try:
            if not self.stock.update_entry(entry_id, expected_quantity=previous, quantity=quantity, location=location):
                if self.stock.get_entry(entry_id) is None:
                    raise StockEntryNotFoundError(entry_id)
                raise AppError(ErrorCatalog.STOCK_ENTRY_CHANGED, details={"stock_entry_id": entry_id})
            if delta > 0:
                self.stock.increment_warehouse(book_id, delta)
            elif delta < 0:
                self._debit_warehouse(book_id, -delta)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(entry)
        log_json(
            logger,
            {
                "event": "stock_entry.update",
                "stock_entry_id": entry_id,
                "book_id": book_id,
                "previous_quantity": previous,
                "quantity": quantity,
                "location": location,
            },
        )
        return entry

    def delete_entry(self, entry_id: int) -> StockEntry:
        """Soft-delete an entry and take its copies back out of the warehouse."""
        entry = self._get_entry(entry_id)
        book_id = entry.book_id
        quantity = entry.quantity

        try:
            if not self.stock.deactivate_entry(entry_id):
                raise StockEntryNotFoundError(entry_id)
            self._debit_warehouse(book_id, quantity)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(entry)
        log_json(
            logger,
            {"event": "stock_entry.delete", "stock_entry_id": entry_id, "book_id": book_id, "quantity": quantity},
        )
        return entry

    def list_entries(self, page: int, page_size: int) -> tuple[list[StockEntry], int]:
        return self.stock.list_entries(page=page, page_size=page_size)
