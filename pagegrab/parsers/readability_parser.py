"""
Readability Parser - Strip navigation/ads/boilerplate and keep the article body
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from loguru import logger
from readabilipy import simple_json_from_html_string


@dataclass
class ParsedArticle:
    """Result of a readability pass."""

    title: str = ''
    byline: str = ''
    text_content: str = ''


class ReadabilityParser:
    """Turn rendered HTML into title, byline and plain text."""

    def __init__(self, use_readability_js: bool = False):
        """
        Initialize readability parser.

        Args:
            use_readability_js: Use Mozilla Readability.js through Node when
                available (readabilipy falls back to its pure-Python
                extractor otherwise)
        """
        self.use_readability_js = use_readability_js

    def parse(self, html_content: str) -> Optional[ParsedArticle]:
        """
        Run the readability pass over HTML.

        Args:
            html_content: Serialized page HTML

        Returns:
            ParsedArticle, or None if no article could be found
        """
        if not html_content or not html_content.strip():
            return None

        article = simple_json_from_html_string(
            html_content,
            use_readability=self.use_readability_js
        )

        title = (article.get('title') or '').strip()
        byline = (article.get('byline') or '').strip()
        text = self._join_text_blocks(article.get('plain_text'), title)

        if not text and article.get('content'):
            text = self._html_to_text(article['content'])

        if not text and not title:
            logger.debug("Readability found no article content")
            return None

        return ParsedArticle(title=title, byline=byline, text_content=text)

    @staticmethod
    def _join_text_blocks(blocks: Optional[List[Dict[str, Any]]], title: str = '') -> str:
        """
        Join readabilipy plain_text blocks into paragraphs.

        The pure-Python extractor repeats the title as the first block; a
        leading block equal to the title is dropped.
        """
        if not blocks:
            return ''
        paragraphs = []
        for block in blocks:
            text = block.get('text', '') if isinstance(block, dict) else str(block)
            text = ' '.join(text.split())
            if text:
                paragraphs.append(text)
        if title and paragraphs and paragraphs[0] == ' '.join(title.split()):
            paragraphs = paragraphs[1:]
        return '\n\n'.join(paragraphs)

    @staticmethod
    def _html_to_text(html_content: str) -> str:
        """Plain text of an HTML fragment."""
        try:
            soup = BeautifulSoup(html_content, 'lxml')
        except Exception:
            # Fallback to html.parser if lxml fails
            soup = BeautifulSoup(html_content, 'html.parser')
        return ' '.join(soup.get_text(separator=' ').split())
