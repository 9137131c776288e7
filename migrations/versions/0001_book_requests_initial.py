"""books, schools, ledgers and book requests

Revision ID: 0001_book_requests_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_book_requests_initial"
down_revision = None
branch_labels = None
depends_on = None

_OPEN_REQUEST_PREDICATE = "status = 'PENDING' AND is_active"


def upgrade() -> None:
    op.create_table(
        "books",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("isbn", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("publisher", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("isbn", name="uq_books_isbn"),
    )

    op.create_table(
        "schools",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("school_name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("contact_person", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "warehouse_stock",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("book_id", sa.Integer(), sa.ForeignKey("books.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("book_id", name="uq_warehouse_stock_book_id"),
        sa.CheckConstraint("quantity >= 0", name="ck_warehouse_stock_quantity_non_negative"),
    )

    op.create_table(
        "school_stock",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("school_id", sa.Integer(), sa.ForeignKey("schools.id"), nullable=False),
        sa.Column("book_id", sa.Integer(), sa.ForeignKey("books.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("school_id", "book_id", name="uq_school_stock_school_book"),
        sa.CheckConstraint("quantity >= 0", name="ck_school_stock_quantity_non_negative"),
    )
    op.create_index("ix_school_stock_school_id", "school_stock", ["school_id"])

    op.create_table(
        "school_inventory_requests",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("school_id", sa.Integer(), sa.ForeignKey("schools.id"), nullable=False),
        sa.Column("book_id", sa.Integer(), sa.ForeignKey("books.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("quantity >= 1", name="ck_school_inventory_requests_quantity_positive"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'REJECTED')",
            name="ck_school_inventory_requests_status",
        ),
    )
    op.create_index(
        "ix_school_inventory_requests_status_created",
        "school_inventory_requests",
        ["status", "created_at"],
    )
    op.create_index(
        "uq_school_inventory_requests_open_pair",
        "school_inventory_requests",
        ["school_id", "book_id"],
        unique=True,
        sqlite_where=sa.text(_OPEN_REQUEST_PREDICATE),
        postgresql_where=sa.text(_OPEN_REQUEST_PREDICATE),
    )

    op.create_table(
        "stock_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("book_id", sa.Integer(), sa.ForeignKey("books.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("quantity >= 1", name="ck_stock_entries_quantity_positive"),
    )
    op.create_index("ix_stock_entries_book_id", "stock_entries", ["book_id"])


def downgrade() -> None:
    op.drop_index("ix_stock_entries_book_id", table_name="stock_entries")
    op.drop_table("stock_entries")
    op.drop_index("uq_school_inventory_requests_open_pair", table_name="school_inventory_requests")
    op.drop_index("ix_school_inventory_requests_status_created", table_name="school_inventory_requests")
    op.drop_table("school_inventory_requests")
    op.drop_index("ix_school_stock_school_id", table_name="school_stock")
    op.drop_table("school_stock")
    op.drop_table("warehouse_stock")
    op.drop_table("schools")
    op.drop_table("books")
