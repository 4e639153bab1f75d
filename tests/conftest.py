"""Shared fixtures for building Notion export archives in tests."""

import zipfile

import pytest

from fetchers import ArchiveEntry

ROOT_ID = 'a' * 32
CHILD_ID = 'b' * 32
GRANDCHILD_ID = 'c' * 32


def build_page(title, body='', properties=''):
    """Render a page the way Notion's HTML export lays it out."""
    table = f'<table class="properties"><tbody>{properties}</tbody></table>' if properties else ''
    return f"""<html>
<head><meta charset="utf-8"/><title>{title}</title></head>
<body>
<article class="page sans">
<header><h1 class="page-title">{title}</h1>{table}</header>
<div class="page-body">{body}</div>
</article>
</body>
</html>"""


@pytest.fixture
def page_html():
    """Factory for Notion export page HTML."""
    return build_page


@pytest.fixture
def make_entry():
    """Factory for in-memory ArchiveEntry objects."""
    def _make(filepath, content=b'', archive='export.zip', size=None):
        data = content.encode('utf-8') if isinstance(content, str) else content
        return ArchiveEntry(
            archive=archive,
            filepath=filepath,
            size=len(data) if size is None else size,
            opener=lambda: data
        )
    return _make


@pytest.fixture
def make_zip(tmp_path):
    """Factory writing a zip archive from a {path: content} mapping."""
    def _make(name, files):
        path = tmp_path / name
        with zipfile.ZipFile(path, 'w') as zf:
            for filepath, content in files.items():
                zf.writestr(filepath, content)
        return str(path)
    return _make


@pytest.fixture
def sample_export(make_zip, page_html):
    """A small export: a root page with one child page, an image and a database CSV."""
    root_body = (
        f'<p>See <a href="Root%20{ROOT_ID}/Child%20{CHILD_ID}.html">Child</a> for details.</p>'
        f'<figure class="image"><a href="Root%20{ROOT_ID}/photo.png">'
        f'<img src="Root%20{ROOT_ID}/photo.png"/></a></figure>'
    )
    child_properties = (
        '<tr class="property-row property-row-select"><th>Status</th>'
        '<td><span class="selected-value">Done</span></td></tr>'
    )
    return make_zip('Export-1.zip', {
        f'Root {ROOT_ID}.html': page_html('Root', root_body),
        f'Root {ROOT_ID}/Child {CHILD_ID}.html': page_html('Child', '<p>Child body</p>', child_properties),
        f'Root {ROOT_ID}/photo.png': b'\x89PNG fake image',
        f'Tasks {GRANDCHILD_ID}.csv': 'Name,Status\nA,Done\n',
    })
