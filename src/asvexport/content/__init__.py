"""
Content model boundary.

Abstract backend interface plus the reference snapshot backend, which reads a
decoded save game stored as JSON.
"""

from .base import ContentBackend, ContentContainer, ContentPack, StoredSavegame

__all__ = ["ContentBackend", "ContentContainer", "ContentPack", "StoredSavegame"]
