"""
Scrape service HTTP application.
"""

import secrets
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Security
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.security import APIKeyHeader
from loguru import logger

from .. import __version__
from ..errors import GENERIC_SCRAPE_ERROR, AuthError, ScrapeServiceError, ValidationError
from ..models.scrape_request import ScrapeRequest, ScrapeResponse
from ..parsers.readability_parser import ReadabilityParser
from ..scrapers.browser_session import BrowserSession
from ..scrapers.scrape_handler import ScrapeHandler
from ..stats.usage_counter import UsageCounter

# Paths reachable without an API key
PUBLIC_PATHS = {"/", "/health"}

api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)


async def verify_api_key(request: Request, api_key: Optional[str] = Security(api_key_header)):
    """Reject requests to protected paths without the configured API key."""
    if request.url.path in PUBLIC_PATHS:
        return

    expected = request.app.state.config.get('api_key') or ''
    if not api_key or not expected or not secrets.compare_digest(api_key.encode(), expected.encode()):
        logger.warning(f"Rejected request to {request.url.path}: invalid API key")
        raise AuthError()


def get_scrape_handler(request: Request) -> ScrapeHandler:
    return request.app.state.scrape_handler


def get_usage_counter(request: Request) -> UsageCounter:
    return request.app.state.usage_counter


router = APIRouter()


@router.post("/scrape", response_model=ScrapeResponse)
async def scrape(
    body: Optional[ScrapeRequest] = None,
    handler: ScrapeHandler = Depends(get_scrape_handler)
):
    """Scrape a URL and return its content in the requested mode."""
    scrape_request = body or ScrapeRequest()

    try:
        content = await handler.handle(scrape_request)
    except ValidationError:
        raise
    except Exception as e:
        # Full detail for operators, generic message for the caller
        logger.exception(
            f"Error during scraping (url: {scrape_request.url}, mode: {scrape_request.mode}): {e}"
        )
        return JSONResponse(status_code=500, content={"error": GENERIC_SCRAPE_ERROR})

    return {"content": content}


@router.get("/stats")
async def stats(usage_counter: UsageCounter = Depends(get_usage_counter)) -> Dict[str, Any]:
    """Scrape counts per month, URL and mode."""
    return usage_counter.dump()


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": "pagegrab"
    }


@router.get("/", response_class=PlainTextResponse)
async def root():
    """Root endpoint"""
    return "Web scraper service is running"


async def service_error_handler(request: Request, exc: ScrapeServiceError):
    """Render service errors as {"error": ...} without internal detail."""
    if exc.status_code >= 500:
        logger.error(f"Request to {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.public_message}
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors."""
    logger.debug(f"Invalid request body for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body"}
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.opt(exception=exc).error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": GENERIC_SCRAPE_ERROR}
    )


def create_app(
    config: Dict[str, Any],
    browser_session: Optional[BrowserSession] = None,
    usage_counter: Optional[UsageCounter] = None,
    parser: Optional[ReadabilityParser] = None
) -> FastAPI:
    """
    Build the application with its process-wide state.

    Args:
        config: Configuration dictionary (see pagegrab.config)
        browser_session: Shared browser session (created from config if omitted)
        usage_counter: Usage counter (created from config if omitted)
        parser: Readability parser (default ReadabilityParser)

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title="pagegrab",
        description="Headless browser scraping service",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        dependencies=[Depends(verify_api_key)]
    )

    browser_session = browser_session or BrowserSession(config)
    usage_counter = usage_counter or UsageCounter(config['storage']['stats_file'])

    app.state.config = config
    app.state.browser_session = browser_session
    app.state.usage_counter = usage_counter
    parser = parser or ReadabilityParser(
        use_readability_js=bool(config.get('parser', {}).get('use_readability_js', False))
    )
    app.state.scrape_handler = ScrapeHandler(config, browser_session, usage_counter, parser)

    app.add_exception_handler(ScrapeServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    app.include_router(router)

    @app.on_event("startup")
    async def startup():
        """Load persisted usage stats."""
        app.state.usage_counter.load()

    @app.on_event("shutdown")
    async def shutdown():
        """Stop the browser with the process."""
        await app.state.browser_session.close()
        logger.info("Browser session closed")

    return app
