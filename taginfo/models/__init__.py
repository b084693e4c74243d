"""
Unified data model exports for taginfo.

Example:
    >>> from taginfo.models import RepoConfig, Platform, TagInfo
"""

from __future__ import annotations

from taginfo.models.item import DatedItem, ItemKind, ReleaseInfo, TagInfo, TagType
from taginfo.models.repository import Platform, RepoConfig

__all__ = [
    "DatedItem",
    "ItemKind",
    "Platform",
    "ReleaseInfo",
    "RepoConfig",
    "TagInfo",
    "TagType",
]
