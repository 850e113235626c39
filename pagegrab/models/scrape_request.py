"""
Request/response models for the scrape endpoint.
"""

from enum import Enum
from typing import Optional

from loguru import logger
from pydantic import BaseModel


class ScrapeMode(str, Enum):
    """Output form produced for a scraped page."""

    TEXT = 'text'
    ARTICLE = 'article'
    SCREENSHOT = 'screenshot'
    SOURCE = 'source'
    PRINT = 'print'

    @classmethod
    def resolve(cls, value: Optional[str]) -> 'ScrapeMode':
        """
        Map a raw mode tag to a mode.

        Omitted or unrecognized tags resolve to TEXT.
        """
        if value is None or value == '':
            return cls.TEXT
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown scrape mode '{value}', falling back to text")
            return cls.TEXT


class ScrapeRequest(BaseModel):
    """Body of POST /scrape."""

    url: Optional[str] = None
    mode: Optional[str] = None

    @property
    def resolved_mode(self) -> ScrapeMode:
        return ScrapeMode.resolve(self.mode)


class ScrapeResponse(BaseModel):
    content: str


class ErrorResponse(BaseModel):
    error: str
