"""FastAPI server exposing the formatter over HTTP.

Endpoints:
    GET  /health       -- liveness and whether remote credentials are configured
    POST /api/format   -- {"text", "overrides"?, "include_toc"?, "local_only"?} -> formatted HTML

One Formatter (and its memo cache) per local_only setting serves every
request; calls are serialized with a lock, so the most recent request's result
is always the one cached.

Usage:
    python -m smart_format.web.app
    # => Uvicorn running on http://localhost:8000
"""

import logging
import os
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from smart_format.config import load_remote_settings
from smart_format.pipeline import Formatter, FormatResult
from smart_format.schema import Element
from smart_format.styling.rules import StyleOverrides

logger = logging.getLogger(__name__)

HOST = os.getenv("SMART_FORMAT_HOST", "0.0.0.0")
PORT = int(os.getenv("SMART_FORMAT_PORT", "8000"))

# ---------------------------------------------------------------------------
# Shared state
# ---------------------------------------------------------------------------

_FORMATTERS: dict[bool, Formatter] = {}  # local_only -> Formatter, created at startup
_LOCK = threading.Lock()


class FormatRequest(BaseModel):
    text: str = ""
    overrides: StyleOverrides | None = None
    include_toc: bool = False
    local_only: bool = False


class FormatResponse(BaseModel):
    html: str
    elements: list[Element]
    classifier: str | None
    status: str
    warning: str | None


def _get_formatter(local_only: bool) -> Formatter:
    if local_only not in _FORMATTERS:
        _FORMATTERS[local_only] = Formatter(local_only=local_only)
    return _FORMATTERS[local_only]


def _format_locked(request: FormatRequest) -> FormatResult:
    with _LOCK:
        formatter = _get_formatter(request.local_only)
        return formatter.format(request.text, overrides=request.overrides, include_toc=request.include_toc)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Build the default formatter on startup."""
    settings = load_remote_settings()
    if settings.configured and settings.enabled:
        logger.info("Remote classifier configured (deployment=%s)", settings.deployment)
    else:
        logger.info("Remote classifier not configured; requests will use the local engine")
    _get_formatter(local_only=False)
    yield
    _FORMATTERS.clear()


app = FastAPI(title="Smart Format", lifespan=lifespan)


@app.get("/health")
async def health():
    """Liveness probe."""
    settings = load_remote_settings()
    return {"status": "ok", "remote_configured": settings.configured and settings.enabled}


@app.post("/api/format", response_model=FormatResponse)
async def format_text(request: FormatRequest):
    """Format raw text into styled HTML."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")

    result = await run_in_threadpool(_format_locked, request)
    if not result.ok:
        logger.warning("Format request failed: %s", result.status)
        raise HTTPException(status_code=500, detail=result.status)
    return FormatResponse(
        html=result.html,
        elements=result.elements,
        classifier=result.classifier,
        status=result.status,
        warning=result.warning,
    )


def main():
    """Start the web server via uvicorn."""
    import uvicorn  # pylint: disable=import-outside-toplevel

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("httpx").setLevel(logging.WARNING)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
