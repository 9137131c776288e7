import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, func, inspect, select
from sqlalchemy.orm import sessionmaker

from app.bookflow.db.models import Book, School, WarehouseStock
from app.bookflow.db.seed import DEFAULT_BOOKS, run_seed


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


def test_migrations_apply(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'migrations.db'}"
    _run_migrations(database_url)

    inspector = inspect(create_engine(database_url, future=True))
    tables = set(inspector.get_table_names())

    assert {
        "books",
        "schools",
        "warehouse_stock",
        "school_stock",
        "school_inventory_requests",
        "stock_entries",
        "authors",
        "book_authors",
    } <= tables

    request_indexes = {index["name"]: index for index in inspector.get_indexes("school_inventory_requests")}
    assert request_indexes["uq_school_inventory_requests_open_pair"]["unique"]
    school_uniques = {constraint["name"] for constraint in inspector.get_unique_constraints("school_stock")}
    assert "uq_school_stock_school_book" in school_uniques
    link_uniques = {constraint["name"] for constraint in inspector.get_unique_constraints("book_authors")}
    assert "uq_book_authors_book_author" in link_uniques


def test_seed_is_idempotent(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'seed.db'}"
    _run_migrations(database_url)

    SessionLocal = sessionmaker(bind=create_engine(database_url, future=True), future=True)

    with SessionLocal() as db:
        run_seed(db)
        algebra = db.execute(select(Book).where(Book.isbn == DEFAULT_BOOKS[0][0])).scalars().one()
        algebra_stock = db.execute(select(WarehouseStock).where(WarehouseStock.book_id == algebra.id)).scalars().one()
        algebra_stock.quantity = 7
        db.commit()

        run_seed(db)

        assert db.scalar(select(func.count()).select_from(Book)) == len(DEFAULT_BOOKS)
        assert db.scalar(select(func.count()).select_from(WarehouseStock)) == len(DEFAULT_BOOKS)
        assert db.scalar(select(func.count()).select_from(School)) == 1
        assert db.scalar(select(WarehouseStock.quantity).where(WarehouseStock.book_id == algebra.id)) == 7
        assert db.execute(select(School.is_approved)).scalar_one() is True
