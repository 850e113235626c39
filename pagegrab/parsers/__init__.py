"""
Content parsers for rendered web pages
"""

from .readability_parser import ParsedArticle, ReadabilityParser

__all__ = ["ParsedArticle", "ReadabilityParser"]
