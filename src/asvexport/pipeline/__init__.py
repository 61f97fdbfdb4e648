"""
Export Pipeline Components

Components:
- source: SaveGameSource for loading saves and extracting stored records
- export: ExportOrchestrator for pack, batch JSON and ad-hoc exports
"""

from .export import ExportOrchestrator
from .source import SaveGameSource

__all__ = ["SaveGameSource", "ExportOrchestrator"]
