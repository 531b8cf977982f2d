"""
Single-page-app fallback: static assets and the templated index page.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse

from ddr_backend.config import Settings, get_settings

logger = logging.getLogger(__name__)

# The one substring of the index page that receives the configured API key.
API_KEY_PLACEHOLDER = "API_KEY: ''"

FALLBACK_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter()


def inject_api_key(html: str, api_key: str) -> str:
    """Replace the first empty API key assignment; anything else is left alone."""
    return html.replace(API_KEY_PLACEHOLDER, f"API_KEY: '{api_key}'", 1)


def find_static_file(static_dir: str, path: str) -> Optional[str]:
    root = os.path.realpath(static_dir)
    candidate = os.path.realpath(os.path.join(root, path))
    if not candidate.startswith(root + os.sep):
        return None
    return candidate if os.path.isfile(candidate) else None


@router.api_route(
    "/{full_path:path}", methods=FALLBACK_METHODS, include_in_schema=False
)
def spa_fallback(
    full_path: str, request: Request, settings: Settings = Depends(get_settings)
):
    index_path = os.path.join(settings.static_dir, settings.index_file)
    if request.method in ("GET", "HEAD"):
        static_path = find_static_file(settings.static_dir, full_path)
        if static_path and static_path != os.path.realpath(index_path):
            return FileResponse(static_path)

    try:
        with open(index_path, encoding="utf-8") as f:
            html = f.read()
    except (OSError, UnicodeDecodeError):
        logger.exception("Failed to load %s", index_path)
        return PlainTextResponse("Error loading index.html", status_code=500)
    return HTMLResponse(inject_api_key(html, settings.api_key))
