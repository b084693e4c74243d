"""
Tag and release data models for taginfo.

:class:`DatedItem` is what sources hand to the resolver; :class:`TagInfo`
and :class:`ReleaseInfo` are the structured metadata fetched for the name
the resolver (or the user) picked.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


class ItemKind(str, Enum):
    """What "latest" is resolved against."""

    TAG = "tag"
    RELEASE = "release"


class TagType(str, Enum):
    """Lightweight (commit) or annotated tag."""

    COMMIT = "commit"
    ANNOTATED = "annotated"


@dataclass(frozen=True)
class DatedItem:
    """A tag or release name with its date.

    Attributes:
        name: Tag or release name as reported by the source.
        date: ISO-8601 timestamp, or ``""`` when the date is unknown.
    """

    name: str
    date: str = ""


@dataclass
class TagInfo:
    """Metadata for one tag.

    Attributes:
        exists: Whether the tag was found.
        tag_name: Name that was looked up.
        tag_sha: SHA of the ref target (tag object or commit).
        tag_type: :class:`TagType` of the tag.
        commit_sha: SHA of the commit the tag ultimately points at.
        tag_message: Annotation message (empty for lightweight tags).
        verified: Whether the platform reports a verified signature.
    """

    exists: bool
    tag_name: str
    tag_sha: str = ""
    tag_type: TagType = TagType.COMMIT
    commit_sha: str = ""
    tag_message: str = ""
    verified: bool = False

    @classmethod
    def missing(cls, tag_name: str) -> "TagInfo":
        """Record for a tag that does not exist."""
        return cls(exists=False, tag_name=tag_name)

    def to_json(self) -> Dict[str, Any]:
        data = asdict(self)
        data["tag_type"] = self.tag_type.value
        return data

    def to_outputs(self) -> Dict[str, str]:
        """Flatten to the string map used for CLI and Actions outputs."""
        return {
            "exists": _flag(self.exists),
            "tag_name": self.tag_name,
            "tag_sha": self.tag_sha,
            "tag_type": self.tag_type.value,
            "commit_sha": self.commit_sha,
            "tag_message": self.tag_message,
            "verified": _flag(self.verified),
        }


@dataclass
class ReleaseInfo:
    """Metadata for one release."""

    exists: bool
    tag_name: str
    release_id: Optional[int] = None
    name: str = ""
    body: str = ""
    draft: bool = False
    prerelease: bool = False
    published_at: str = ""
    html_url: str = ""

    @classmethod
    def missing(cls, tag_name: str) -> "ReleaseInfo":
        """Record for a release that does not exist."""
        return cls(exists=False, tag_name=tag_name)

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)

    def to_outputs(self) -> Dict[str, str]:
        return {
            "exists": _flag(self.exists),
            "tag_name": self.tag_name,
            "release_id": "" if self.release_id is None else str(self.release_id),
            "release_name": self.name,
            "release_body": self.body,
            "draft": _flag(self.draft),
            "prerelease": _flag(self.prerelease),
            "published_at": self.published_at,
            "html_url": self.html_url,
        }


def _flag(value: bool) -> str:
    return "true" if value else "false"
