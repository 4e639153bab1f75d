"""Markdown converter for Notion HTML export pages."""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup
from markdownify import MarkdownConverter as MarkdownifyConverter

from models import ConversionResult
from .html_cleaner import HtmlCleaner
from .link_processor import LinkContext, LinkProcessor
from .property_extractor import PropertyExtractor

logger = logging.getLogger('notion_markdown_importer.converters.markdownconverter')

PLAIN_LANGUAGES = {'plain', 'text', 'plaintext'}


class NotionMarkdownConverter(MarkdownifyConverter):
    """
    Converts a Notion HTML export page into Markdown plus page properties.

    This class extends markdownify.MarkdownConverter to provide:
    - Notion block rewriting (to-dos, callouts, toggles, equations, bookmarks)
    - Property table extraction for front matter
    - Link and image resolution against the planned vault paths
    """

    def __init__(self, logger: logging.Logger = None, **kwargs):
        """Initialize markdown converter; extra keyword arguments are markdownify options."""
        markdownify_options = {
            'heading_style': 'ATX',
            'bullets': '-',
            'escape_asterisks': False,
            'escape_underscores': False,
            'escape_misc': False
        }
        markdownify_options.update(kwargs)
        super().__init__(**markdownify_options)

        self.logger = logger or logging.getLogger('notion_markdown_importer.converters.markdownconverter')
        self.html_cleaner = HtmlCleaner(self.logger)
        self.link_processor: Optional[LinkProcessor] = None

    def convert_document(self, html_content: str, context: Optional[LinkContext] = None) -> ConversionResult:
        """
        Convert a Notion page to Markdown.

        Args:
            html_content: Raw page HTML
            context: Link resolution context; links are kept verbatim without one

        Returns:
            ConversionResult with the Markdown body and ordered properties
        """
        self.link_processor = LinkProcessor(context, self.logger) if context else None

        soup = BeautifulSoup(html_content, 'lxml')
        properties = PropertyExtractor(self.link_processor, self.logger).extract(soup)
        body = self.html_cleaner.clean(soup)

        markdown = self._post_process_markdown(super().convert(str(body)))

        if self.link_processor:
            self.logger.debug(f"Link processing complete: {self.link_processor.stats}")
        return ConversionResult(body=markdown, properties=properties)

    def _post_process_markdown(self, markdown: str) -> str:
        """Final cleanup pass: collapse blank lines and trailing whitespace."""
        markdown = re.sub(r'[ \t]+\n(?=\n)', '\n', markdown)
        markdown = re.sub(r'\n{3,}', '\n\n', markdown)
        markdown = markdown.strip('\n')
        return markdown + '\n' if markdown else ''

    def convert_a(self, el, text, parent_tags=None, **kwargs):
        """Handle links, rewriting those that point into the import."""
        target = self.link_processor.resolve(el.get('href')) if self.link_processor else None
        if target is None:
            return super().convert_a(el, text, parent_tags=parent_tags, **kwargs)
        return self.link_processor.format_link(target, text)

    def convert_img(self, el, text, parent_tags=None, **kwargs):
        """Handle images; attachments become embeds."""
        src = el.get('src', '')
        alt = el.get('alt', '') or el.get('title', '')

        target = self.link_processor.resolve(src) if self.link_processor else None
        if target is None:
            return f'![{alt}]({src})'

        return self.link_processor.format_link(target, alt, embed=target.is_attachment)

    def convert_blockquote(self, el, text, parent_tags=None, **kwargs):
        """Handle blockquotes, with callouts rendered as ``> [!note]``."""
        text = (text or '').strip()
        if parent_tags and '_inline' in parent_tags:
            return text

        callout_type = el.get('data-callout', '')
        quoted_lines = [f'> [!{callout_type}]'] if callout_type else []
        if text:
            for line in text.split('\n'):
                quoted_lines.append(f'> {line}' if line.strip() else '>')

        if not quoted_lines:
            return ''
        return '\n\n' + '\n'.join(quoted_lines) + '\n\n'

    def convert_pre(self, el, text, parent_tags=None, **kwargs):
        """Handle code blocks, keeping the Notion language annotation."""
        code_el = el.find('code')
        source = code_el if code_el is not None else el
        language = self._extract_code_language(source)
        code_text = source.get_text().strip('\n')
        return f"\n\n```{language}\n{code_text}\n```\n\n"

    def _extract_code_language(self, element) -> str:
        """Extract programming language from a ``language-*`` class."""
        for cls in element.get('class', []):
            if str(cls).startswith('language-'):
                language = str(cls)[len('language-'):].lower()
                return '' if language in PLAIN_LANGUAGES else language
        return ''


__all__ = ['NotionMarkdownConverter']
