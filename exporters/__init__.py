"""Vault storage package for the Notion import pipeline.

Package Structure:
- vault_storage: Local-filesystem vault with atomic file writes, idempotent
  folder creation and YAML front-matter editing

Configuration Referenced:
- export.output_directory: Vault root directory
"""

from .vault_storage import EMPTY_FRONT_MATTER, VaultStorage, render_front_matter, split_front_matter

__all__ = [
    'EMPTY_FRONT_MATTER',
    'VaultStorage',
    'render_front_matter',
    'split_front_matter'
]
