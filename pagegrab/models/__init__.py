"""Request and response models."""

from .scrape_request import ScrapeMode, ScrapeRequest, ScrapeResponse, ErrorResponse

__all__ = [
    'ScrapeMode',
    'ScrapeRequest',
    'ScrapeResponse',
    'ErrorResponse'
]
