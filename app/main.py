from fastapi import FastAPI

from app.bookflow.api import api_router
from app.bookflow.core.config import settings
from app.bookflow.core.errors import setup_exception_handlers
from app.bookflow.core.logging import configure_logging
from app.bookflow.middleware.observability import ObservabilityMiddleware
from app.bookflow.middleware.trace import TraceIdMiddleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
