"""Converters package for Notion HTML export to Markdown conversion."""

import logging

from .html_cleaner import HtmlCleaner
from .link_processor import LinkContext, LinkProcessor, LinkTarget
from .markdown_converter import NotionMarkdownConverter
from .property_extractor import PropertyExtractor

logger = logging.getLogger('notion_markdown_importer.converters')


def convert_document(html_content, context=None, logger=None):
    """
    Convenience function to convert one Notion page from HTML to Markdown.

    This runs the full conversion pipeline:
    1. Property table extraction (becomes front matter)
    2. HTML cleaning (page header dropped, Notion blocks rewritten)
    3. Markdown generation using markdownify, with links resolved
       against the planned vault paths when a context is given

    Args:
        html_content: Raw page HTML
        context: Optional LinkContext for link resolution
        logger: Optional logger instance (uses module logger if not provided)

    Returns:
        ConversionResult with body and properties

    Example:
        >>> from converters import convert_document
        >>> result = convert_document('<div class="page-body"><p>Hello</p></div>')
        >>> result.body
        'Hello\\n'
    """
    if logger is None:
        logger = logging.getLogger('notion_markdown_importer.converters')

    converter = NotionMarkdownConverter(logger=logger)
    return converter.convert_document(html_content, context)


__all__ = [
    'convert_document',
    'HtmlCleaner',
    'LinkContext',
    'LinkProcessor',
    'LinkTarget',
    'NotionMarkdownConverter',
    'PropertyExtractor'
]
