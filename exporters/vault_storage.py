"""Local-filesystem vault storage with atomic writes and YAML front-matter editing."""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from errors import WriteFailureError

FRONT_MATTER_PATTERN = re.compile(r'^---\s*\n(.*?\n)??---\s*(?:\n|$)(.*)$', re.DOTALL)
EMPTY_FRONT_MATTER = '---\n---\n'


def split_front_matter(content: str, logger: Optional[logging.Logger] = None) -> Tuple[Dict[str, Any], str]:
    """
    Extract YAML front matter from markdown content.

    Args:
        content: Full file content
        logger: Optional logger for parse warnings

    Returns:
        Tuple of (front matter dict, markdown body); an unparseable block is
        treated as part of the body
    """
    match = FRONT_MATTER_PATTERN.match(content)
    if not match:
        return {}, content

    try:
        front_matter = yaml.safe_load(match.group(1) or '') or {}
    except yaml.YAMLError as e:
        if logger:
            logger.warning(f"Failed to parse YAML front matter: {e}")
        return {}, content

    if not isinstance(front_matter, dict):
        if logger:
            logger.warning("Front matter is not a dictionary")
        return {}, content
    return front_matter, match.group(2)


def render_front_matter(front_matter: Dict[str, Any]) -> str:
    """Render a front matter block, or '' when there is nothing to write."""
    if not front_matter:
        return ''
    yaml_str = yaml.dump(
        front_matter,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=1000
    )
    return f"---\n{yaml_str}---\n"


class VaultStorage:
    """
    Storage capability rooted at a vault directory.

    Paths are vault-relative and forward-slash separated; folder paths may
    carry a trailing ``/``. Every file write goes to a temporary file in the
    destination folder first and is renamed into place.
    """

    def __init__(self, root: str, logger: Optional[logging.Logger] = None):
        """
        Initialize the vault storage.

        Args:
            root: Vault root directory (created on first write if missing)
            logger: Logger instance
        """
        self.root = Path(root).resolve()
        self.logger = logger or logging.getLogger('notion_markdown_importer.exporters.vault_storage')
        self.stats = {
            'folders_created': 0,
            'files_written': 0,
            'bytes_written': 0
        }

    def resolve(self, path: str) -> Path:
        """
        Map a vault path to a filesystem path.

        Raises:
            WriteFailureError: If the path escapes the vault root
        """
        relative = path.replace('\\', '/').strip('/')
        full_path = (self.root / relative).resolve()
        if full_path != self.root and self.root not in full_path.parents:
            raise WriteFailureError(f"Path escapes the vault root: {path}")
        return full_path

    def exists(self, path: str) -> bool:
        """Check whether a file or folder already exists in the vault."""
        return self.resolve(path).exists()

    def create_folder(self, path: str) -> None:
        """Create a folder and its parents; existing folders are left alone."""
        folder = self.resolve(path)
        if folder.is_dir():
            return
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteFailureError(f"Cannot create folder {path}: {e}") from e
        self.stats['folders_created'] += 1
        self.logger.debug(f"Created folder {path}")

    def write_text(self, path: str, content: str) -> None:
        """Write a UTF-8 text file atomically."""
        self._write(path, content.encode('utf-8'))

    def write_binary(self, path: str, data: bytes) -> None:
        """Write a binary file atomically."""
        self._write(path, data)

    def read_text(self, path: str) -> str:
        """Read a UTF-8 text file."""
        return self.resolve(path).read_text(encoding='utf-8')

    def read_binary(self, path: str) -> bytes:
        """Read a binary file."""
        return self.resolve(path).read_bytes()

    def edit_front_matter(self, path: str, mutator: Callable[[Dict[str, Any]], None]) -> None:
        """
        Apply a mutation to a note's front matter and rewrite the note.

        Args:
            path: Vault path of an existing note
            mutator: Callable receiving the front matter dict to modify in place
        """
        front_matter, body = split_front_matter(self.read_text(path), self.logger)
        mutator(front_matter)
        self.write_text(path, render_front_matter(front_matter) + body)

    def _write(self, path: str, data: bytes) -> None:
        target = self.resolve(path)
        if not self.root.exists():
            self.create_folder('')
        fd, temp_path = None, None
        try:
            fd, temp_path = tempfile.mkstemp(dir=target.parent, prefix='.', suffix='.tmp')
            with os.fdopen(fd, 'wb') as temp_file:
                fd = None
                temp_file.write(data)
            os.replace(temp_path, target)
            temp_path = None
        except OSError as e:
            raise WriteFailureError(f"Cannot write {path}: {e}") from e
        finally:
            if fd is not None:
                os.close(fd)
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)

        self.stats['files_written'] += 1
        self.stats['bytes_written'] += len(data)
        self.logger.debug(f"Wrote {len(data)} bytes to {path}")


__all__ = ['VaultStorage', 'render_front_matter', 'split_front_matter']
