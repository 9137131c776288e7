from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import case, func, or_, select, update

from app.bookflow.db.models import Book, SchoolStock, StockEntry, WarehouseStock


@dataclass(frozen=True)
class WarehouseQueryFilters:
    q: str | None = None


def _dialect_insert(db, entity):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"upsert is not supported for dialect {dialect!r}")
    return insert(entity)


class StockRepository:
    """Warehouse and school ledgers.

    Every write here is a single statement whose guard is evaluated by the
    database at write time, so callers never act on a stale read. Nothing is
    committed; the caller owns the transaction.
    """

    def __init__(self, db):
        self.db = db

    def get_warehouse_stock(self, book_id: int) -> WarehouseStock | None:
        return (
            self.db.execute(select(WarehouseStock).where(WarehouseStock.book_id == book_id))
            .scalars()
            .first()
        )

    def get_warehouse_quantity(self, book_id: int) -> int:
        quantity = self.db.execute(
            select(WarehouseStock.quantity).where(
                WarehouseStock.book_id == book_id,
                WarehouseStock.is_active.is_(True),
            )
        ).scalar_one_or_none()
        return quantity or 0

    def decrement_warehouse(self, book_id: int, quantity: int) -> bool:
        result = self.db.execute(
            update(WarehouseStock)
            .where(
                WarehouseStock.book_id == book_id,
                WarehouseStock.is_active.is_(True),
                WarehouseStock.quantity >= quantity,
            )
            .values(quantity=WarehouseStock.quantity - quantity, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def increment_warehouse(self, book_id: int, quantity: int) -> None:
        now = datetime.utcnow()
        stmt = _dialect_insert(self.db, WarehouseStock).values(
            book_id=book_id,
            quantity=quantity,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["book_id"],
            set_={
                "quantity": case(
                    (WarehouseStock.is_active.is_(True), WarehouseStock.quantity + stmt.excluded.quantity),
                    else_=stmt.excluded.quantity,
                ),
                "is_active": True,
                "updated_at": now,
            },
        )
        self.db.execute(stmt)

    def upsert_school_stock(self, school_id: int, book_id: int, quantity: int) -> None:
        now = datetime.utcnow()
        stmt = _dialect_insert(self.db, SchoolStock).values(
            school_id=school_id,
            book_id=book_id,
            quantity=quantity,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        # A soft-deleted row restarts from the transferred quantity.
        stmt = stmt.on_conflict_do_update(
            index_elements=["school_id", "book_id"],
            set_={
                "quantity": case(
                    (SchoolStock.is_active.is_(True), SchoolStock.quantity + stmt.excluded.quantity),
                    else_=stmt.excluded.quantity,
                ),
                "is_active": True,
                "updated_at": now,
            },
        )
        self.db.execute(stmt)

    def get_school_stock(self, school_id: int, book_id: int) -> SchoolStock | None:
        return (
            self.db.execute(
                select(SchoolStock).where(SchoolStock.school_id == school_id, SchoolStock.book_id == book_id)
            )
            .scalars()
            .first()
        )

    def list_warehouse_stock(
        self,
        filters: WarehouseQueryFilters,
        *,
        page: int,
        page_size: int,
    ) -> tuple[list[WarehouseStock], int]:
        query = (
            select(WarehouseStock)
            .join(Book, Book.id == WarehouseStock.book_id)
            .where(WarehouseStock.is_active.is_(True), Book.is_active.is_(True))
        )
        if filters.q:
            like = f"%{filters.q}%"
            query = query.where(or_(Book.title.ilike(like), Book.isbn.ilike(like)))
        total = self.db.execute(select(func.count()).select_from(query.subquery())).scalar_one()
        rows = (
            self.db.execute(
                query.order_by(WarehouseStock.created_at.desc(), WarehouseStock.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            .scalars()
            .all()
        )
        return rows, int(total)

    def list_school_stock(self, school_id: int, *, page: int, page_size: int) -> tuple[list[SchoolStock], int]:
        query = select(SchoolStock).where(SchoolStock.school_id == school_id, SchoolStock.is_active.is_(True))
        total = self.db.execute(select(func.count()).select_from(query.subquery())).scalar_one()
        rows = (
            self.db.execute(
                query.order_by(SchoolStock.created_at.desc(), SchoolStock.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            .scalars()
            .all()
        )
        return rows, int(total)

    def add_entry(self, entry: StockEntry) -> StockEntry:
        self.db.add(entry)
        self.db.flush()
        return entry

    def list_entries(self, *, page: int, page_size: int) -> tuple[list[StockEntry], int]:
        query = select(StockEntry).where(StockEntry.is_active.is_(True))
        total = self.db.execute(select(func.count()).select_from(query.subquery())).scalar_one()
        rows = (
            self.db.execute(
                query.order_by(StockEntry.created_at.desc(), StockEntry.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            .scalars()
            .all()
        )
        return rows, int(total)

    def get_entry(self, entry_id: int) -> StockEntry | None:
        return (
            self.db.execute(select(StockEntry).where(StockEntry.id == entry_id, StockEntry.is_active.is_(True)))
            .scalars()
            .first()
        )

    def update_entry(self, entry_id: int, *, expected_quantity: int, quantity: int, location: str) -> bool:
        # Compare-and-set on the quantity the caller based its warehouse delta on.
        result = self.db.execute(
            update(StockEntry)
            .where(
                StockEntry.id == entry_id,
                StockEntry.is_active.is_(True),
                StockEntry.quantity == expected_quantity,
            )
            .values(quantity=quantity, location=location, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def deactivate_entry(self, entry_id: int) -> bool:
        result = self.db.execute(
            update(StockEntry)
            .where(StockEntry.id == entry_id, StockEntry.is_active.is_(True))
            .values(is_active=False, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
