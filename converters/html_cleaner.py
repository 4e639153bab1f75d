"""HTML cleaner for rewriting Notion export markup into convertible HTML."""

import logging

from bs4 import BeautifulSoup, NavigableString, Tag

logger = logging.getLogger('notion_markdown_importer.converters.htmlcleaner')

CALLOUT_TYPE = 'note'
TEX_ENCODING = 'application/x-tex'


class HtmlCleaner:
    """Reduces a Notion page to its body and rewrites Notion blocks for markdownify."""

    def __init__(self, logger: logging.Logger = None):
        """Initialize HTML cleaner with optional logger."""
        self.logger = logger or logging.getLogger('notion_markdown_importer.converters.htmlcleaner')

    def clean(self, soup: BeautifulSoup) -> Tag:
        """
        Main entry point to clean a parsed Notion page.

        The page header (icon, cover, title and properties table) is dropped;
        only ``div.page-body`` is kept when present.

        Args:
            soup: BeautifulSoup object with Notion export HTML

        Returns:
            Cleaned element holding the page body
        """
        for element in soup.find_all(['style', 'script', 'header']):
            element.decompose()

        body = soup.select_one('div.page-body') or soup.body or soup

        self._convert_checkboxes(body)
        self._convert_callouts(body)
        self._convert_toggles(body)
        self._convert_equations(body)
        self._convert_bookmarks(body)
        self._unwrap_image_links(body)
        self._remove_link_icons(body)

        self.logger.debug("HTML cleaning completed")
        return body

    def _convert_checkboxes(self, body: Tag) -> None:
        """To-do items: ``div.checkbox`` becomes a task marker."""
        for checkbox in body.find_all('div', class_='checkbox'):
            marker = '[x] ' if 'checkbox-on' in checkbox.get('class', []) else '[ ] '
            checkbox.replace_with(NavigableString(marker))

        for item in body.select('ul.to-do-list > li'):
            for span in item.find_all('span', recursive=False):
                span.unwrap()

    def _convert_callouts(self, body: Tag) -> None:
        for figure in body.find_all('figure', class_='callout'):
            blockquote = self._new_tag('blockquote')
            blockquote['data-callout'] = CALLOUT_TYPE

            divs = figure.find_all('div', recursive=False)
            # First div holds the icon, the last one the callout content
            content = divs[-1] if len(divs) > 1 else figure
            for child in list(content.children):
                blockquote.append(child.extract())

            figure.replace_with(blockquote)
            self.logger.debug("Converted callout to blockquote")

    def _convert_toggles(self, body: Tag) -> None:
        for toggle_list in body.find_all('ul', class_='toggle'):
            for item in toggle_list.find_all('li', recursive=False):
                item.unwrap()
            toggle_list.unwrap()

        for summary in body.find_all('summary'):
            # Toggle headings keep their heading element
            summary.name = 'div' if summary.find(['h1', 'h2', 'h3', 'h4', 'h5', 'h6']) else 'p'
        for details in body.find_all('details'):
            details.name = 'div'
            details.attrs.pop('open', None)

    def _convert_equations(self, body: Tag) -> None:
        for figure in body.find_all('figure', class_='equation'):
            tex = self._tex_source(figure)
            paragraph = self._new_tag('p')
            paragraph.string = f"$${tex}$$"
            figure.replace_with(paragraph)

        for token in body.find_all('span', class_='notion-text-equation-token'):
            token.replace_with(NavigableString(f"${self._tex_source(token)}$"))

    @staticmethod
    def _tex_source(element: Tag) -> str:
        annotation = element.find('annotation', attrs={'encoding': TEX_ENCODING})
        if annotation is not None:
            return annotation.get_text().strip()
        return element.get_text().strip()

    def _convert_bookmarks(self, body: Tag) -> None:
        for bookmark in body.find_all('a', class_='bookmark'):
            href = bookmark.get('href', '')
            title_el = bookmark.find(class_='bookmark-title')
            title = title_el.get_text().strip() if title_el else ''

            link = self._new_tag('a')
            link['href'] = href
            link.string = title or href
            bookmark.replace_with(link)

    def _unwrap_image_links(self, body: Tag) -> None:
        """Notion wraps images in a link to themselves; keep only the image."""
        for anchor in body.find_all('a'):
            children = [child for child in anchor.children
                        if not (isinstance(child, NavigableString) and not child.strip())]
            if len(children) == 1 and getattr(children[0], 'name', None) == 'img':
                anchor.unwrap()

    def _remove_link_icons(self, body: Tag) -> None:
        for figure in body.find_all('figure', class_='link-to-page'):
            for icon in figure.find_all(['span', 'img'], class_='icon'):
                icon.decompose()

    @staticmethod
    def _new_tag(name: str) -> Tag:
        return BeautifulSoup('', 'lxml').new_tag(name)


__all__ = ['HtmlCleaner']
