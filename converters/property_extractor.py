"""Page property extraction from the properties table of a Notion HTML export."""

import logging
import re
from typing import Any, List

from bs4 import BeautifulSoup, Tag
from dateutil import parser as date_parser

from models import NotionProperty

logger = logging.getLogger('notion_markdown_importer.converters.propertyextractor')

PROPERTY_ROW_PREFIX = 'property-row-'
DATE_RANGE_SEPARATOR = '→'
TIME_PATTERN = re.compile(r'\d{1,2}:\d{2}')

LIST_TYPES = {'multi_select', 'person', 'file'}
DATE_TYPES = {'date', 'created_time', 'last_edited_time'}


class PropertyExtractor:
    """Turns ``table.properties`` rows into ordered NotionProperty values."""

    def __init__(self, link_processor=None, logger: logging.Logger = None):
        """
        Initialize property extractor.

        Args:
            link_processor: LinkProcessor used to render relation properties
            logger: Optional logger instance
        """
        self.link_processor = link_processor
        self.logger = logger or logging.getLogger('notion_markdown_importer.converters.propertyextractor')

    def extract(self, soup: BeautifulSoup) -> List[NotionProperty]:
        """
        Extract page properties and remove the table from the soup.

        Args:
            soup: Parsed page HTML

        Returns:
            Properties in table order
        """
        table = soup.find('table', class_='properties')
        if table is None:
            return []

        properties = []
        for row in table.find_all('tr', class_='property-row'):
            header = row.find('th')
            cell = row.find('td')
            if header is None or cell is None:
                continue

            key = ' '.join(header.get_text().split())
            if not key:
                continue

            property_type = self._property_type(row)
            properties.append(NotionProperty(key, self._parse_value(property_type, cell)))

        table.decompose()
        self.logger.debug(f"Extracted {len(properties)} page properties")
        return properties

    @staticmethod
    def _property_type(row: Tag) -> str:
        for cls in row.get('class', []):
            if cls.startswith(PROPERTY_ROW_PREFIX):
                return cls[len(PROPERTY_ROW_PREFIX):]
        return 'text'

    def _parse_value(self, property_type: str, cell: Tag) -> Any:
        if property_type == 'checkbox':
            checkbox = cell.find(class_='checkbox')
            return checkbox is not None and 'checkbox-on' in checkbox.get('class', [])

        if property_type in LIST_TYPES:
            return self._list_values(property_type, cell)

        if property_type == 'relation':
            return self._relation_values(cell)

        text = ' '.join(cell.get_text().split())
        if not text:
            return None

        if property_type in DATE_TYPES:
            return self._parse_date(text)
        if property_type == 'number':
            return self._parse_number(text)
        return text

    @staticmethod
    def _list_values(property_type: str, cell: Tag) -> List[str]:
        if property_type == 'multi_select':
            items = cell.find_all(class_='selected-value')
        elif property_type == 'person':
            items = cell.find_all(class_='user')
        else:
            items = cell.find_all('a')

        values = [' '.join(item.get_text().split()) for item in items]
        if not items:
            values = [part.strip() for part in cell.get_text().split(',')]
        return [value for value in values if value]

    def _relation_values(self, cell: Tag) -> List[str]:
        values = []
        for anchor in cell.find_all('a'):
            text = ' '.join(anchor.get_text().split())
            target = self.link_processor.resolve(anchor.get('href')) if self.link_processor else None
            if target is not None:
                values.append(self.link_processor.wikilink(target))
            elif text:
                values.append(text)
        return values

    def _parse_date(self, text: str) -> str:
        """ISO date or datetime; ranges and unparseable values stay as text."""
        value = text.lstrip('@').strip()
        if DATE_RANGE_SEPARATOR in value:
            return value
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError) as e:
            self.logger.debug(f"Keeping date property as text '{value}': {e}")
            return value

        if TIME_PATTERN.search(value):
            return parsed.isoformat()
        return parsed.date().isoformat()

    @staticmethod
    def _parse_number(text: str) -> Any:
        cleaned = text.replace(',', '')
        for cast in (int, float):
            try:
                return cast(cleaned)
            except ValueError:
                continue
        return text


def extract_properties(html_content: str, link_processor=None) -> List[NotionProperty]:
    """Extract page properties from raw HTML."""
    return PropertyExtractor(link_processor).extract(BeautifulSoup(html_content, 'lxml'))


__all__ = ['PropertyExtractor', 'extract_properties']
