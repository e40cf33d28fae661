"""TagWiki FastAPI application."""

import json
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tagwiki.config import Settings, settings
from tagwiki.core.errors import MalformedInput, WikiError
from tagwiki.core.models import (
    ErrorResponse,
    OkResponse,
    PageBodyResponse,
    PageListResponse,
    PageWrite,
    TagCountsResponse,
    TagListResponse,
    TagPagesResponse,
)
from tagwiki.core.storage import FileStorage
from tagwiki.core.tags import IncrementalTagIndex, TagIndex
from tagwiki.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def create_tag_index(storage: FileStorage, config: Settings) -> TagIndex:
    """Pick the tag index implementation for the given settings."""
    if config.incremental_index:
        return IncrementalTagIndex(storage, match_mode=config.tag_match)
    return TagIndex(storage, match_mode=config.tag_match)


class SPAStaticFiles(StaticFiles):
    """Static files for a built frontend; unknown paths get index.html."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
            return await super().get_response("index.html", scope)


def create_app(config: Settings | None = None) -> FastAPI:
    """Build the application around an explicit page directory."""
    config = config or settings
    storage = FileStorage(config.data_dir, extension=config.page_extension)
    tag_index = create_tag_index(storage, config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: configure logging and warm the tag index."""
        configure_logging(config.log_level)
        if isinstance(tag_index, IncrementalTagIndex):
            await tag_index.rebuild()
        logger.info(
            "Serving %d pages from %s (tag match: %s)",
            len(await storage.list_pages()),
            storage.base_path,
            config.tag_match,
        )
        yield
        logger.info("Shutting down")

    app = FastAPI(
        title=config.app_title,
        debug=config.debug,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.storage = storage
    app.state.tag_index = tag_index

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log method, path, status and duration of every request."""
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(WikiError)
    async def wiki_error_handler(request: Request, exc: WikiError) -> JSONResponse:
        """Convert core errors to the error envelope."""
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(ErrorResponse(message=exc.message).model_dump())

    @app.get("/health")
    async def health() -> OkResponse:
        return OkResponse()

    # ========== Pages ==========

    @app.get("/api/page/{slug}")
    async def get_page(slug: str) -> PageBodyResponse:
        """Read a page body."""
        page = await storage.get_page(slug)
        return PageBodyResponse(body=page.body)

    @app.post("/api/page/{slug}")
    async def put_page(slug: str, request: Request) -> OkResponse:
        """Write a page body. Expects JSON {"body": "<text>"}."""
        try:
            payload = PageWrite.model_validate(await request.json())
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
            raise MalformedInput("Request must be a JSON object with a string body") from exc

        page = await storage.save_page(slug, payload.body)
        await tag_index.page_saved(page.slug, page.body)
        return OkResponse()

    @app.get("/api/pages/all")
    async def list_pages() -> PageListResponse:
        """List all page slugs."""
        return PageListResponse(pages=await storage.list_pages())

    # ========== Tags ==========

    @app.get("/api/tags/all")
    async def all_tags() -> TagListResponse:
        """List every distinct tag in the wiki."""
        return TagListResponse(tags=await tag_index.all_tags())

    @app.get("/api/tags/{tag}")
    async def pages_by_tag(tag: str) -> TagPagesResponse:
        """List pages that mention a tag."""
        result = await tag_index.find_pages_by_tag(tag)
        return TagPagesResponse(tag=result.tag, pages=result.pages)

    @app.get("/api/tag-counts")
    async def tag_counts() -> TagCountsResponse:
        """Number of pages carrying each tag."""
        return TagCountsResponse(counts=await tag_index.tag_counts())

    # ========== Frontend ==========

    # Mounted last so the API routes above take precedence
    if config.static_dir is not None and config.static_dir.is_dir():
        app.mount(
            "/",
            SPAStaticFiles(directory=str(config.static_dir), html=True),
            name="frontend",
        )

    return app


app = create_app()
