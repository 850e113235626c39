"""
Scrape Handler - Open a page on the shared browser, navigate, extract, close
"""

from typing import Any, Awaitable, Callable, Dict, Optional

from loguru import logger
from playwright.async_api import Error as PlaywrightError, Page

from ..errors import ExtractionError, NavigationError, ValidationError
from ..extractors.content_extractors import (
    extract_enhanced_article,
    extract_readable_content,
    get_page_source,
    get_print_version,
    take_screenshot
)
from ..models.scrape_request import ScrapeMode, ScrapeRequest
from ..parsers.readability_parser import ReadabilityParser
from ..stats.usage_counter import UsageCounter
from .browser_session import BrowserSession

Extractor = Callable[[Page], Awaitable[str]]


class ScrapeHandler:
    """Handle one scrape request end to end."""

    def __init__(
        self,
        config: Dict[str, Any],
        browser_session: BrowserSession,
        usage_counter: UsageCounter,
        parser: Optional[ReadabilityParser] = None
    ):
        """
        Initialize scrape handler.

        Args:
            config: Configuration dictionary
            browser_session: Shared browser session
            usage_counter: Usage counter recording successful scrapes
            parser: Readability parser for text/article modes
        """
        browser_config = config.get('browser', {})
        self.navigation_timeout = browser_config.get('navigation_timeout', 60) * 1000  # Convert to milliseconds
        self.wait_until = browser_config.get('wait_until', 'networkidle')
        self.viewport = browser_config.get('viewport')

        self.browser_session = browser_session
        self.usage_counter = usage_counter
        self.parser = parser or ReadabilityParser()

        self.extractors: Dict[ScrapeMode, Extractor] = {
            ScrapeMode.TEXT: lambda page: extract_readable_content(page, self.parser),
            ScrapeMode.ARTICLE: lambda page: extract_enhanced_article(page, self.parser),
            ScrapeMode.SCREENSHOT: take_screenshot,
            ScrapeMode.SOURCE: get_page_source,
            ScrapeMode.PRINT: get_print_version,
        }

    async def _new_page(self) -> Page:
        browser = await self.browser_session.acquire()
        logger.debug("Browser ready")

        page_options = {'ignore_https_errors': True}
        if self.viewport:
            page_options['viewport'] = self.viewport
        page = await browser.new_page(**page_options)
        logger.debug("New page created")
        return page

    async def _navigate(self, page: Page, url: str) -> None:
        logger.info(f"Navigating to {url}...")
        try:
            await page.goto(url, wait_until=self.wait_until, timeout=self.navigation_timeout)
        except PlaywrightError as e:
            raise NavigationError(f"Navigation to {url} failed: {e}") from e
        logger.debug("Page loaded successfully")

    async def handle(self, request: ScrapeRequest) -> str:
        """
        Scrape a URL in the requested mode.

        Args:
            request: Scrape request

        Returns:
            Content produced by the mode's extractor

        Raises:
            ValidationError: If the url is missing
            LaunchError: If the browser could not be started
            NavigationError: If the page could not be loaded
            ExtractionError: If the extractor failed
        """
        if not request.url:
            raise ValidationError("URL is required")

        url = request.url
        mode = request.resolved_mode
        extractor = self.extractors[mode]

        logger.info(f"Starting scrape for URL: {url}, Mode: {mode.value}")
        page: Optional[Page] = None
        try:
            page = await self._new_page()
            await self._navigate(page, url)

            try:
                result = await extractor(page)
            except Exception as e:
                raise ExtractionError(f"{mode.value} extraction failed for {url}: {e}") from e

            logger.info(f"Scrape completed successfully for mode: {mode.value}")
            self.usage_counter.record(url, mode.value)
            return result
        finally:
            if page is not None:
                logger.debug("Closing page...")
                try:
                    await page.close()
                except Exception as e:
                    logger.warning(f"Error closing page: {e}")
