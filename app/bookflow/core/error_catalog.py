from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    REQUEST_NOT_FOUND = ErrorDefinition(
        "REQUEST_NOT_FOUND",
        "Request not found",
        status.HTTP_404_NOT_FOUND,
    )
    REQUEST_NOT_PENDING = ErrorDefinition(
        "REQUEST_NOT_PENDING",
        "Request is not pending",
        status.HTTP_400_BAD_REQUEST,
    )
    INSUFFICIENT_STOCK = ErrorDefinition(
        "INSUFFICIENT_STOCK",
        "Insufficient stock in warehouse",
        status.HTTP_400_BAD_REQUEST,
    )
    DUPLICATE_REQUEST = ErrorDefinition(
        "DUPLICATE_REQUEST",
        "Request already exists for this book",
        status.HTTP_400_BAD_REQUEST,
    )
    BOOK_NOT_FOUND = ErrorDefinition(
        "BOOK_NOT_FOUND",
        "Book not found",
        status.HTTP_404_NOT_FOUND,
    )
    SCHOOL_NOT_FOUND = ErrorDefinition(
        "SCHOOL_NOT_FOUND",
        "School not found",
        status.HTTP_404_NOT_FOUND,
    )
    SCHOOL_NOT_APPROVED = ErrorDefinition(
        "SCHOOL_NOT_APPROVED",
        "School registration is not approved",
        status.HTTP_400_BAD_REQUEST,
    )
    SCHOOL_ALREADY_APPROVED = ErrorDefinition(
        "SCHOOL_ALREADY_APPROVED",
        "School is already approved",
        status.HTTP_400_BAD_REQUEST,
    )
    SCHOOL_IN_USE = ErrorDefinition(
        "SCHOOL_IN_USE",
        "School has book requests or stock and cannot be removed",
        status.HTTP_409_CONFLICT,
    )
    STOCK_ENTRY_NOT_FOUND = ErrorDefinition(
        "STOCK_ENTRY_NOT_FOUND",
        "Stock entry not found",
        status.HTTP_404_NOT_FOUND,
    )
    STOCK_ENTRY_CHANGED = ErrorDefinition(
        "STOCK_ENTRY_CHANGED",
        "Stock entry was changed by another request",
        status.HTTP_409_CONFLICT,
    )
    AUTHOR_NOT_FOUND = ErrorDefinition(
        "AUTHOR_NOT_FOUND",
        "Author not found",
        status.HTTP_404_NOT_FOUND,
    )
    DUPLICATE_ISBN = ErrorDefinition(
        "DUPLICATE_ISBN",
        "A book with this ISBN already exists",
        status.HTTP_409_CONFLICT,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    LOCK_TIMEOUT = ErrorDefinition(
        "LOCK_TIMEOUT",
        "Lock wait timeout",
        status.HTTP_409_CONFLICT,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)


class RequestNotFoundError(AppError):
    def __init__(self, request_id: int):
        super().__init__(ErrorCatalog.REQUEST_NOT_FOUND, details={"request_id": request_id})


class RequestNotPendingError(AppError):
    def __init__(self, request_id: int, status: str | None = None):
        super().__init__(
            ErrorCatalog.REQUEST_NOT_PENDING,
            details={"request_id": request_id, "status": status},
        )


class InsufficientStockError(AppError):
    def __init__(self, book_id: int, requested: int, available: int | None = None):
        super().__init__(
            ErrorCatalog.INSUFFICIENT_STOCK,
            details={"book_id": book_id, "requested": requested, "available": available},
        )


class DuplicateRequestError(AppError):
    def __init__(self, school_id: int, book_id: int, existing_request_id: int | None):
        super().__init__(
            ErrorCatalog.DUPLICATE_REQUEST,
            details={
                "school_id": school_id,
                "book_id": book_id,
                "existing_request_id": existing_request_id,
            },
        )


class BookNotFoundError(AppError):
    def __init__(self, book_id: int):
        super().__init__(ErrorCatalog.BOOK_NOT_FOUND, details={"book_id": book_id})


class SchoolNotFoundError(AppError):
    def __init__(self, school_id: int):
        super().__init__(ErrorCatalog.SCHOOL_NOT_FOUND, details={"school_id": school_id})


class SchoolNotApprovedError(AppError):
    def __init__(self, school_id: int):
        super().__init__(ErrorCatalog.SCHOOL_NOT_APPROVED, details={"school_id": school_id})


class SchoolAlreadyApprovedError(AppError):
    def __init__(self, school_id: int):
        super().__init__(ErrorCatalog.SCHOOL_ALREADY_APPROVED, details={"school_id": school_id})


class StockEntryNotFoundError(AppError):
    def __init__(self, entry_id: int):
        super().__init__(ErrorCatalog.STOCK_ENTRY_NOT_FOUND, details={"stock_entry_id": entry_id})


class AuthorNotFoundError(AppError):
    def __init__(self, author_id: int):
        super().__init__(ErrorCatalog.AUTHOR_NOT_FOUND, details={"author_id": author_id})
