"""authors and book/author links

Revision ID: 0002_book_authors
Revises: 0001_book_requests_initial
Create Date: 2026-10-19 12:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0002_book_authors"
down_revision = "0001_book_requests_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "authors",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("biography", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "book_authors",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("book_id", sa.Integer(), sa.ForeignKey("books.id"), nullable=False),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("authors.id"), nullable=False),
        sa.UniqueConstraint("book_id", "author_id", name="uq_book_authors_book_author"),
    )
    op.create_index("ix_book_authors_book_id", "book_authors", ["book_id"])


def downgrade() -> None:
    op.drop_index("ix_book_authors_book_id", table_name="book_authors")
    op.drop_table("book_authors")
    op.drop_table("authors")
