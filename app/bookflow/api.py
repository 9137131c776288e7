from fastapi import APIRouter

from app.bookflow.core.config import settings
from app.bookflow.routers.book_requests import router as book_requests_router
from app.bookflow.routers.catalog import router as catalog_router
from app.bookflow.routers.health import router as health_router
from app.bookflow.routers.inventory import router as inventory_router
from app.bookflow.routers.metrics import router as metrics_router
from app.bookflow.routers.stock_entries import router as stock_entries_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(book_requests_router, tags=["book-requests"])
api_router.include_router(inventory_router, tags=["inventory"])
api_router.include_router(stock_entries_router, tags=["stock-entries"])
api_router.include_router(catalog_router, tags=["catalog"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
