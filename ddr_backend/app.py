"""
FastAPI application entry point for the site backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from ddr_backend.config import get_settings
from ddr_backend.db import DocumentStoreError
from ddr_backend.dependencies import UPLOADS_URL_PATH
from ddr_backend.routes import router
from ddr_backend.site import router as site_router
from ddr_backend.storage import StorageError

logger = logging.getLogger(__name__)


async def server_fault_handler(request: Request, exc: Exception) -> JSONResponse:
    """Echo any handler fault to the caller as a 500."""
    logger.exception("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"name": exc.__class__.__name__, "message": str(exc)},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="DDR Site Backend (FastAPI)", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DocumentStoreError, server_fault_handler)
    app.add_exception_handler(StorageError, server_fault_handler)
    app.add_exception_handler(Exception, server_fault_handler)

    app.include_router(router, prefix=settings.api_prefix)
    app.mount(
        UPLOADS_URL_PATH,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )
    # Must stay last: it matches every path.
    app.include_router(site_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    settings = get_settings()
    logger.info("Server running at http://localhost:%s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
