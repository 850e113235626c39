"""
Error taxonomy for the scrape service
"""

from typing import Optional

GENERIC_SCRAPE_ERROR = "An error occurred while scraping the website"


class ScrapeServiceError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    public_message = GENERIC_SCRAPE_ERROR

    def __init__(self, message: Optional[str] = None, public_message: Optional[str] = None):
        super().__init__(message or public_message or self.public_message)
        if public_message:
            self.public_message = public_message


class ValidationError(ScrapeServiceError):
    """Missing or malformed request fields."""

    status_code = 400
    public_message = "URL is required"


class AuthError(ScrapeServiceError):
    """Missing or wrong API key."""

    status_code = 401
    public_message = "Unauthorized: Invalid API key"


class NavigationError(ScrapeServiceError):
    """Target URL unreachable, DNS failure or navigation timeout."""


class ExtractionError(ScrapeServiceError):
    """Readability pass or DOM evaluation failed."""


class LaunchError(ScrapeServiceError):
    """No usable browser binary, or the browser process failed to start."""


class PersistenceError(ScrapeServiceError):
    """Usage stats file could not be read or written."""


class ConfigurationError(Exception):
    """Fatal configuration problem detected at startup."""
