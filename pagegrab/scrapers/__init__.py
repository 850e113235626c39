"""
Browser session management and scrape request handling
"""

from .browser_session import BrowserSession
from .scrape_handler import ScrapeHandler

__all__ = ["BrowserSession", "ScrapeHandler"]
