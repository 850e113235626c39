"""
Content Extractors - Turn a navigated browser page into text, HTML or images
"""

import asyncio
import base64
from typing import Dict

from loguru import logger
from playwright.async_api import Page

from ..parsers.readability_parser import ReadabilityParser

# Meta tags copied into the article metadata section, in output order
RELEVANT_META_TAGS = ['description', 'keywords', 'author', 'publication_date']

PRINT_STYLESHEET = """
    @media print {
        @page { size: auto; margin: 20mm; }
        body { -webkit-print-color-adjust: exact; }
    }
"""

INJECT_STYLE_JS = """
    (css) => {
        const style = document.createElement('style');
        style.textContent = css;
        document.head.appendChild(style);
    }
"""

OUTER_HTML_JS = "() => document.documentElement.outerHTML"

META_TAGS_JS = """
    () => {
        const data = {};
        for (const meta of document.getElementsByTagName('meta')) {
            const name = meta.getAttribute('name') || meta.getAttribute('property');
            const content = meta.getAttribute('content');
            if (name && content) {
                data[name] = content;
            }
        }
        return data;
    }
"""


async def get_page_source(page: Page) -> str:
    """Rendered HTML of the page (post-navigation DOM)."""
    logger.debug("Getting page source")
    content = await page.content()
    logger.debug("Page source retrieved")
    return content


async def get_print_version(page: Page) -> str:
    """
    Capture the page HTML under print media emulation.

    Injects a print stylesheet, switches the emulated media to print, reads
    the document HTML and switches back to screen.
    """
    logger.debug("Starting print version extraction...")
    try:
        await page.evaluate(INJECT_STYLE_JS, PRINT_STYLESHEET)
        await page.emulate_media(media='print')
        content = await page.evaluate(OUTER_HTML_JS)
        await page.emulate_media(media='screen')
    except Exception as e:
        logger.error(f"Error in print version extraction: {e}")
        raise

    logger.debug(f"Print version extraction completed. Content length: {len(content)}")
    return content


async def take_screenshot(page: Page) -> str:
    """Full-page PNG screenshot, base64 encoded."""
    logger.debug("Taking screenshot")
    screenshot = await page.screenshot(full_page=True, type='png')
    logger.debug(f"Screenshot taken ({len(screenshot)} bytes)")
    return base64.b64encode(screenshot).decode('ascii')


async def extract_readable_content(page: Page, parser: ReadabilityParser) -> str:
    """Readable plain text of the page, or '' if no article was found."""
    html_content = await page.content()
    article = await asyncio.to_thread(parser.parse, html_content)
    return article.text_content if article else ''


async def _get_meta_tags(page: Page) -> Dict[str, str]:
    """Meta tag contents keyed by name or property."""
    metadata = await page.evaluate(META_TAGS_JS)
    return metadata or {}


async def extract_enhanced_article(page: Page, parser: ReadabilityParser) -> str:
    """
    Readable text with title, byline and selected meta tags.

    Output layout:
        Title: <title>

        Author: <byline>        (only when a byline was detected)

        Content:
        <text>

        Metadata:
        <tag>: <value>          (one line per present tag)

    Returns:
        Enhanced article text, or '' if no article was found
    """
    html_content = await page.content()
    article = await asyncio.to_thread(parser.parse, html_content)
    if not article:
        return ''

    enhanced = f"Title: {article.title}\n\n"
    if article.byline:
        enhanced += f"Author: {article.byline}\n\n"
    enhanced += f"Content:\n{article.text_content}"

    metadata = await _get_meta_tags(page)
    enhanced += "\n\nMetadata:"
    for tag in RELEVANT_META_TAGS:
        if metadata.get(tag):
            enhanced += f"\n{tag}: {metadata[tag]}"

    return enhanced
