from dataclasses import dataclass

from fastapi import Query

from app.bookflow.core.config import settings
from app.bookflow.core.error_catalog import AppError, ErrorCatalog


@dataclass(frozen=True)
class PageParams:
    page: int
    page_size: int


def get_page_params(
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
) -> PageParams:
    resolved = page_size or settings.DEFAULT_PAGE_SIZE
    if resolved > settings.MAX_PAGE_SIZE:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"message": f"page_size must be at most {settings.MAX_PAGE_SIZE}", "page_size": resolved},
        )
    return PageParams(page=page, page_size=resolved)
