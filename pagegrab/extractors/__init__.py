"""
Extractors producing the response content for each scrape mode
"""

from .content_extractors import (
    RELEVANT_META_TAGS,
    extract_enhanced_article,
    extract_readable_content,
    get_page_source,
    get_print_version,
    take_screenshot
)

__all__ = [
    "RELEVANT_META_TAGS",
    "extract_enhanced_article",
    "extract_readable_content",
    "get_page_source",
    "get_print_version",
    "take_screenshot"
]
