from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select, update

from app.bookflow.db.models import REQUEST_STATUS_PENDING, SchoolInventoryRequest


@dataclass(frozen=True)
class BookRequestQueryFilters:
    status: str | None = None
    school_id: int | None = None
    book_id: int | None = None


class BookRequestRepository:
    def __init__(self, db):
        self.db = db

    def get_request(self, request_id: int) -> SchoolInventoryRequest | None:
        return (
            self.db.execute(select(SchoolInventoryRequest).where(SchoolInventoryRequest.id == request_id))
            .scalars()
            .first()
        )

    def find_open_request(self, school_id: int, book_id: int) -> SchoolInventoryRequest | None:
        return (
            self.db.execute(
                select(SchoolInventoryRequest).where(
                    SchoolInventoryRequest.school_id == school_id,
                    SchoolInventoryRequest.book_id == book_id,
                    SchoolInventoryRequest.status == REQUEST_STATUS_PENDING,
                    SchoolInventoryRequest.is_active.is_(True),
                )
            )
            .scalars()
            .first()
        )

    def get_status(self, request_id: int) -> str | None:
        # Column select bypasses the identity map.
        return self.db.execute(
            select(SchoolInventoryRequest.status).where(SchoolInventoryRequest.id == request_id)
        ).scalar_one_or_none()

    def add(self, request: SchoolInventoryRequest) -> SchoolInventoryRequest:
        self.db.add(request)
        self.db.flush()
        return request

    def transition_status(self, request_id: int, *, from_status: str, to_status: str) -> bool:
        """Compare-and-set on the status column; False when the row was not in ``from_status``."""
        now = datetime.utcnow()
        result = self.db.execute(
            update(SchoolInventoryRequest)
            .where(SchoolInventoryRequest.id == request_id, SchoolInventoryRequest.status == from_status)
            .values(status=to_status, updated_at=now, resolved_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def list_requests(
        self,
        filters: BookRequestQueryFilters,
        *,
        page: int,
        page_size: int,
    ) -> tuple[list[SchoolInventoryRequest], int]:
        query = select(SchoolInventoryRequest).where(SchoolInventoryRequest.is_active.is_(True))
        if filters.status:
            query = query.where(SchoolInventoryRequest.status == filters.status)
        if filters.school_id is not None:
            query = query.where(SchoolInventoryRequest.school_id == filters.school_id)
        if filters.book_id is not None:
            query = query.where(SchoolInventoryRequest.book_id == filters.book_id)

        total = self.db.execute(select(func.count()).select_from(query.subquery())).scalar_one()
        rows = (
            self.db.execute(
                query.order_by(SchoolInventoryRequest.created_at.desc(), SchoolInventoryRequest.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            .scalars()
            .all()
        )
        return rows, int(total)
