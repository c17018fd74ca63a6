"""FastAPI service exposing the blog summarize pipeline."""

from __future__ import annotations

import asyncio
import os
from contextlib import asynccontextmanager
from functools import partial
from typing import Any, Awaitable, Dict

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from .config import Settings, configure_logging, get_settings
from .dictionary import get_dictionary
from .errors import PipelineError
from .fetcher import build_http_client, fetch
from .models import ErrorResponse, SummarizeRequest, SummarizeResponse
from .storage import open_stores, persist
from .workflow import PipelineResult, process_blog

DISCONNECT_POLL_SECONDS = 0.5

# Status code per failure kind; unknown kinds map to 500.
ERROR_STATUS: Dict[str, int] = {
    "invalid_url": status.HTTP_400_BAD_REQUEST,
    "network_error": status.HTTP_502_BAD_GATEWAY,
    "http_error": status.HTTP_502_BAD_GATEWAY,
    "fetch_error": status.HTTP_502_BAD_GATEWAY,
    "timeout": status.HTTP_504_GATEWAY_TIMEOUT,
    "insufficient_content": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "persistence_failed": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Initializing application...")
    app.state.dictionary = get_dictionary()
    app.state.http_client = build_http_client(settings.fetch_timeout_seconds)
    app.state.stores = await open_stores(settings)
    try:
        yield
    finally:
        logger.info("Shutting down application...")
        await app.state.http_client.aclose()
        await app.state.stores.aclose()


app = FastAPI(title="Blog Summarizer", lifespan=lifespan)


def _add_cors(app: FastAPI, settings: Settings) -> None:
    """Let the summarize form call the API from another origin."""
    origins = settings.cors_allow_origins or ["*"]
    # Credentialed responses cannot name a wildcard origin.
    allow_credentials = settings.cors_allow_credentials and origins != ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )


_add_cors(app, get_settings())


async def _run_blog_pipeline(url: str, app: FastAPI) -> PipelineResult:
    """Run the pipeline with the shared client, stores, and dictionary held on app.state."""
    state = app.state
    client = getattr(state, "http_client", None)
    stores = getattr(state, "stores", None)
    persist_fn = None
    if stores is not None and stores.enabled:
        persist_fn = partial(
            persist, summary_store=stores.summary_store, archive=stores.archive
        )
    return await process_blog(
        url,
        fetch_fn=partial(fetch, client=client),
        persist_fn=persist_fn,
        dictionary=getattr(state, "dictionary", None),
    )


async def _cancel_on_disconnect(request: Request, work: Awaitable[Any]) -> Any:
    """Await ``work``, cancelling it if the caller goes away first."""
    task = asyncio.ensure_future(work)
    while not task.done():
        done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
        if not done and await request.is_disconnected():
            logger.info(f"Client disconnected; cancelling {request.url.path}")
            task.cancel()
            break
    return await task


def _error_response(status_code: int, message: str, kind: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, kind=kind).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/summarize")
async def summarize_blog(payload: SummarizeRequest, request: Request) -> JSONResponse:
    """
    Fetch, extract, summarize, translate, and store one blog post.

    Failures return {"error", "kind"} with a status derived from the kind;
    no partial results are included.
    """
    url = (payload.url or "").strip()
    if not url:
        return _error_response(status.HTTP_400_BAD_REQUEST, "URL is required", "invalid_url")

    try:
        result = await _cancel_on_disconnect(request, _run_blog_pipeline(url, request.app))
    except PipelineError as exc:
        status_code = ERROR_STATUS.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
        logger.warning(f"Processing {url} failed: {exc.kind} ({exc.message})")
        return _error_response(status_code, exc.message, exc.kind)
    except Exception:
        logger.exception(f"Unexpected error processing {url}")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to process blog",
            "processing_error",
        )

    body = SummarizeResponse(**result.to_response()).model_dump(by_alias=True)
    return JSONResponse(status_code=status.HTTP_200_OK, content=body)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "blog_summarizer.server:app",
        host=os.getenv("BLOG_HOST", "0.0.0.0"),
        port=int(os.getenv("BLOG_PORT", "8000")),
        reload=os.getenv("BLOG_RELOAD", "false").lower() == "true",
    )
