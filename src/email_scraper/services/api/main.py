#!/usr/bin/env python3
"""
Email Scraper API

This FastAPI service exposes single-URL, fast, streaming and batch scraping
plus CSV export of batch results.
"""

import asyncio
import json
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict

import psutil
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response, StreamingResponse

from ... import __version__
from ...config import settings
from ...errors import InvalidInputError
from ...logging_config import setup_logging
from ...models import BatchScrapeRequest, ExportRequest, ScrapeOptions, ScrapeRequest, SeedResult
from ...utils.validators import validate_url
from ..batch.orchestrator import run_batch, scrape
from ..crawling.events import CrawlEventChannel
from ..export.csv_export import export_filename, to_csv

# Create module-specific logger
logger = setup_logging("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application."""
    logger.info("Starting service", extra={"version": __version__, "port": settings.api_port})
    yield
    logger.info("Service shutdown complete")


app = FastAPI(title="Email Scraper", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    logger.warning("Rejected request", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.warning("Invalid request body", extra={"path": request.url.path, "error": message})
    return JSONResponse(status_code=400, content={"error": message})


def _dump(model) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def _single_response(result: SeedResult, mode: str = None) -> Dict[str, Any]:
    if not result.success:
        raise HTTPException(
            status_code=500,
            detail={"error": "Scraping failed", "message": result.error},
        )
    data = _dump(result)
    data.pop("success", None)
    data.pop("error", None)
    data.pop("errorType", None)
    if mode:
        data["mode"] = mode
    return {"success": True, "data": data}


@app.get("/health")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint."""
    try:
        metrics = {
            "cpu_percent": psutil.cpu_percent(),
            "memory_percent": psutil.virtual_memory().percent,
            "disk_usage_percent": psutil.disk_usage("/").percent,
        }
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "metrics": metrics,
        }
    except Exception as e:
        logger.error("Health check failed", extra={"error": str(e)})
        raise HTTPException(status_code=503, detail=str(e))


@app.get("/api/status")
async def status() -> Dict[str, Any]:
    return {
        "status": "running",
        "version": __version__,
        "endpoints": {
            "/api/scrape": "POST - Standard scraping",
            "/api/scrape/fast": "POST - Fast scraping",
            "/api/scrape/fast/progress": "POST - Fast scraping with progress events",
            "/api/scrape/batch": "POST - Batch scraping",
            "/api/export/csv": "POST - Export batch results as CSV",
            "/api/status": "GET - Service status",
            "/health": "GET - Health check",
        },
        "ai_categorization": bool(settings.openrouter_api_key),
        "timestamp": datetime.now().isoformat(),
    }


@app.post("/api/scrape")
async def scrape_url(request: ScrapeRequest) -> Dict[str, Any]:
    logger.info("Scrape requested", extra={"url": request.url})
    result = await scrape(request.url, request.options)
    return _single_response(result)


def _fast_options(request: ScrapeRequest) -> ScrapeOptions:
    return ScrapeOptions.fast(
        collect_personal_data=request.options.collect_personal_data,
        use_ai_categorization=request.options.use_ai_categorization,
    )


@app.post("/api/scrape/fast")
async def scrape_fast(request: ScrapeRequest) -> Dict[str, Any]:
    logger.info("Fast scrape requested", extra={"url": request.url})
    result = await scrape(request.url, _fast_options(request))
    return _single_response(result, mode="fast")


def _sse(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


async def _progress_stream(url: str, options: ScrapeOptions) -> AsyncIterator[str]:
    channel = CrawlEventChannel()
    task = asyncio.create_task(scrape(url, options, events=channel))
    task.add_done_callback(lambda _: channel.close())

    async for event in channel:
        yield _sse(event.to_dict())

    try:
        result = await task
    except Exception as e:
        logger.error("Progress scrape failed", extra={"url": url, "error": str(e)})
        yield _sse({"type": "error", "error": "Fast scraping failed", "message": str(e)})
        return

    if result.success:
        data = _dump(result)
        data["mode"] = "fast"
        yield _sse({"type": "complete", "success": True, "data": data})
    else:
        yield _sse({"type": "error", "error": "Fast scraping failed", "message": result.error})


@app.post("/api/scrape/fast/progress")
async def scrape_fast_progress(request: ScrapeRequest) -> StreamingResponse:
    url = validate_url(request.url)
    logger.info("Fast scrape with progress requested", extra={"url": url})
    return StreamingResponse(
        _progress_stream(url, _fast_options(request)),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@app.post("/api/scrape/batch")
async def scrape_batch(request: BatchScrapeRequest) -> Dict[str, Any]:
    logger.info("Batch scrape requested", extra={"total_urls": len(request.urls)})
    batch = await run_batch(request.urls, request.options)
    return {"success": True, "data": _dump(batch)}


@app.post("/api/export/csv")
async def export_csv(request: ExportRequest) -> Response:
    filename = export_filename()
    return Response(
        content=to_csv(request.data),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
