"""
FastAPI application exposing the PageLens analysis pipeline over HTTP.

Every response uses the envelope ``{"success": bool, "data" | "error": ...}``.
"""

from __future__ import annotations

import json
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Callable, Dict, Optional
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from ..config import Config
from ..container import PageLensContainer
from ..errors import PageLensError, ValidationFailure
from ..observability.metrics import export_prometheus
from ..storage import InMemoryResultStore

logger = structlog.get_logger(__name__)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"message": message, "statusCode": status_code}},
    )


def create_app(container: Optional[PageLensContainer] = None) -> FastAPI:
    """Build the application around a container; the lifespan owns its lifecycle."""
    container = container or PageLensContainer()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        async with container.lifecycle():
            logger.info("PageLens API started")
            yield
        logger.info("PageLens API stopped")

    config = container.config or Config()
    app = FastAPI(title="PageLens API", version=config.version, lifespan=lifespan)
    app.state.container = container

    def store() -> InMemoryResultStore:
        if container.store is None:
            raise RuntimeError("Container must be initialized before the result store is used")
        return container.store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    @app.exception_handler(PageLensError)
    async def handle_pagelens_error(request: Request, exc: PageLensError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.to_dict()})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=True)
        return _error("Internal server error", 500)

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next: Callable) -> Any:
        """Add request id and timing headers and log every request."""
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "API request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            response_time_ms=round(process_time * 1000, 2),
            request_id=request_id,
        )
        return response

    @app.post("/api/scrape")
    async def scrape(request: Request) -> Dict[str, Any]:
        """Analyse a page and return the assembled result."""
        try:
            payload = await request.json()
        except json.JSONDecodeError as e:
            raise ValidationFailure("Validation error: request body must be valid JSON") from e

        outcome = await container.pipeline.run(payload)
        body: Dict[str, Any] = {"success": True, "data": outcome.result.to_dict()}
        if outcome.cached:
            body["cached"] = True
        return body

    @app.get("/api/scrape/{result_id}")
    async def get_result(result_id: str) -> Any:
        result = store().get(result_id)
        if result is None:
            return _error("Scrape result not found", 404)
        return {"success": True, "data": result.to_dict()}

    @app.get("/api/history")
    async def history() -> Dict[str, Any]:
        return {"success": True, "data": [entry.to_dict() for entry in store().history()]}

    @app.delete("/api/cancel/{job_id}")
    async def cancel(job_id: str) -> Any:
        if container.pipeline.cancel(job_id):
            return {"success": True, "message": "Scraping job cancelled"}
        return _error("Job not found or already completed", 404)

    @app.get("/api/cache/stats")
    async def cache_stats() -> Dict[str, Any]:
        return {"success": True, "data": store().cache_stats()}

    @app.delete("/api/cache/clear")
    async def clear_cache() -> Dict[str, Any]:
        store().clear_cache()
        return {"success": True, "message": "Cache cleared"}

    @app.get("/api/health")
    async def health_check() -> Dict[str, Any]:
        return {
            "success": True,
            "message": "Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "components": container.get_health_status(),
        }

    @app.get("/metrics")
    async def get_prometheus_metrics() -> Response:
        """Endpoint for Prometheus to scrape."""
        return Response(export_prometheus(), media_type="text/plain")

    return app


def run_web_server(container: Optional[PageLensContainer] = None, host: str = "127.0.0.1", port: int = 3001) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    logger.info("Starting PageLens API", host=host, port=port)
    uvicorn.run(create_app(container), host=host, port=port)
