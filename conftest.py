"""
Shared fixtures: fake browser/page/parser so tests run without Chromium.
"""

from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from pagegrab.config import load_config
from pagegrab.extractors.content_extractors import INJECT_STYLE_JS, META_TAGS_JS, OUTER_HTML_JS
from pagegrab.parsers.readability_parser import ParsedArticle
from pagegrab.scrapers.browser_session import BrowserSession
from pagegrab.stats.usage_counter import UsageCounter
from pagegrab.web.app import create_app

API_KEY = "test-api-key"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
STATIC_PAGE = "<html><head><title>T</title></head><body>Hello <b>World</b></body></html>"


class FakePage:
    """Stands in for a Playwright page."""

    def __init__(
        self,
        html: str = STATIC_PAGE,
        meta: Optional[Dict[str, str]] = None,
        goto_error: Optional[Exception] = None,
        evaluate_error: Optional[Exception] = None
    ):
        self.html = html
        self.meta = meta or {}
        self.goto_error = goto_error
        self.evaluate_error = evaluate_error
        self.goto_calls: List[dict] = []
        self.media_calls: List[str] = []
        self.injected_styles: List[str] = []
        self.closed = False

    async def goto(self, url, **kwargs):
        self.goto_calls.append({"url": url, **kwargs})
        if self.goto_error:
            raise self.goto_error

    async def content(self):
        return self.html

    async def evaluate(self, script, arg=None):
        if self.evaluate_error:
            raise self.evaluate_error
        if script == INJECT_STYLE_JS:
            self.injected_styles.append(arg)
            return None
        if script == OUTER_HTML_JS:
            return self.html
        if script == META_TAGS_JS:
            return dict(self.meta)
        raise AssertionError(f"unexpected script: {script}")

    async def emulate_media(self, media=None):
        self.media_calls.append(media)

    async def screenshot(self, full_page=False, type="png"):
        assert full_page is True
        return PNG_SIGNATURE + b"fake-image-data"

    async def close(self):
        self.closed = True


class FakeBrowser:
    """Stands in for a Playwright browser."""

    def __init__(self, page_factory=FakePage):
        self.page_factory = page_factory
        self.pages: List[FakePage] = []
        self.page_options: List[dict] = []
        self.handlers: Dict[str, list] = {}
        self.closed = False

    async def new_page(self, **kwargs):
        self.page_options.append(kwargs)
        page = self.page_factory()
        self.pages.append(page)
        return page

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def disconnect(self):
        for handler in self.handlers.get("disconnected", []):
            handler(self)

    async def close(self):
        self.closed = True


class FakeParser:
    """Readability stand-in returning a fixed article."""

    def __init__(self, article: Optional[ParsedArticle] = None, error: Optional[Exception] = None):
        self.article = article
        self.error = error
        self.calls: List[str] = []

    def parse(self, html_content):
        self.calls.append(html_content)
        if self.error:
            raise self.error
        return self.article


@pytest.fixture
def config(tmp_path, monkeypatch):
    """Service config pointing stats at a temp dir."""
    monkeypatch.setenv("API_KEY", API_KEY)
    monkeypatch.setenv("STATS_FILE", str(tmp_path / "data" / "scrape_stats.json"))
    monkeypatch.delenv("CHROMIUM_PATH", raising=False)
    return load_config(config_path=str(tmp_path / "missing.yaml"))


@pytest.fixture
def fake_browser():
    return FakeBrowser()


@pytest.fixture
def browser_session(config, fake_browser):
    """Session whose launcher hands out the fake browser."""

    async def launcher():
        return fake_browser

    return BrowserSession(config, launcher=launcher)


@pytest.fixture
def usage_counter(config):
    return UsageCounter(config["storage"]["stats_file"])


@pytest.fixture
def parser():
    return FakeParser(ParsedArticle(title="T", byline="", text_content="Hello World"))


@pytest.fixture
def app(config, browser_session, usage_counter, parser):
    return create_app(config, browser_session=browser_session, usage_counter=usage_counter, parser=parser)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"x-api-key": API_KEY}
