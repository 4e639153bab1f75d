"""
Notion to Markdown Import Tool

A standalone tool for importing Notion "HTML" exports into a Markdown vault.

Features:
- Reads export zip archives (including nested Part-N archives) and extracted folders
- Rebuilds the page hierarchy from the folder structure of the export
- Resolves duplicates across multi-part exports and breaks parent cycles
- Plans collision-free note and attachment paths before anything is written
- Converts pages to Markdown with wikilinks or relative Markdown links
- Writes database properties as YAML front matter
- Dry-run mode and JSON/CSV import reports

Basic Usage:
    1. Copy config.yaml.example to config.yaml (optional)
    2. Run: python migrate.py Export.zip --output-dir ./vault

Example Configuration (config.yaml):
    notion:
        export_files:
            - "./Export-Part-1.zip"
            - "./Export-Part-2.zip"

    export:
        output_directory: "./vault"
        target_folder: "Notion"
        parents_in_subfolders: true
"""

__version__ = "1.0.0"
__description__ = "Notion HTML export to Markdown vault importer"
