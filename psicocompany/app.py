"""
FastAPI application entry point for the web front-end.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from psicocompany.config import get_settings
from psicocompany.exceptions import BackendError
from psicocompany.middleware import ToastSessionMiddleware
from psicocompany.pages import router as pages_router
from psicocompany.routes import router

logger = logging.getLogger(__name__)


async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    logger.error("Unhandled backend error on %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=502, content={"detail": exc.message, "code": exc.code}
    )


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app = FastAPI(title=f"{settings.site_name} (FastAPI)", version="0.1.0")
    app.add_middleware(ToastSessionMiddleware)
    app.add_exception_handler(BackendError, backend_error_handler)
    app.include_router(router, prefix=settings.api_prefix)
    app.include_router(pages_router)
    return app


app = create_app()
