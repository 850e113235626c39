"""
pagegrab - fetch a URL in a headless browser and return its content
as text, article, HTML source, print HTML or a screenshot.
"""

__version__ = "1.0.0"
