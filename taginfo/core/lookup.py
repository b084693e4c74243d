"""Resolve a requested name and fetch its metadata.

:class:`TagLookup` is the flow behind ``taginfo info``: a requested name of
``latest`` (any case) is resolved with :class:`LatestResolver`, any other
name is used as given, and the tag or release metadata is then fetched
from the same backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from taginfo.models.item import ItemKind
from taginfo.sources.base import ItemInfo, RepositoryClient
from taginfo.core.resolver import EventCallback, LatestResolver, Resolution
from taginfo.utils.logger import get_logger
from taginfo.constants import LATEST_ALIAS

logger = get_logger("lookup")

__all__ = ["TagLookup", "LookupResult", "is_latest_alias"]


def is_latest_alias(name: str) -> bool:
    """Return True if ``name`` asks for the latest tag or release."""
    return name.strip().lower() == LATEST_ALIAS


@dataclass
class LookupResult:
    """Everything ``taginfo info`` reports about one name.

    Attributes:
        requested: Name as the user gave it.
        resolved: Name that was looked up.
        kind: Tag or release.
        resolution: How ``latest`` was resolved, or ``None`` when the
            requested name was used directly.
        info: Fetched metadata.
    """

    requested: str
    resolved: str
    kind: ItemKind
    resolution: Optional[Resolution]
    info: ItemInfo

    @property
    def exists(self) -> bool:
        return self.info.exists

    def to_outputs(self) -> Dict[str, str]:
        """Flat string map for printing and GitHub Actions outputs."""
        return self.info.to_outputs()

    def to_json(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "requested": self.requested,
            "resolved": self.resolved,
            "kind": self.kind.value,
            "strategy": self.resolution.strategy.value if self.resolution else None,
            "pattern": self.resolution.pattern if self.resolution else None,
        }
        data.update(self.info.to_json())
        return data


class TagLookup:
    """Resolve and fetch tags or releases from one backend.

    Args:
        client: Backend to query.
        patterns: Format patterns used when resolving ``latest``.
        kind: Work with tags or releases.
        on_event: Observer for resolver progress events.
    """

    def __init__(
        self,
        client: RepositoryClient,
        patterns: Optional[Sequence[str]] = None,
        kind: ItemKind = ItemKind.TAG,
        on_event: Optional[EventCallback] = None,
    ) -> None:
        self.client = client
        self.patterns = list(patterns) if patterns else None
        self.kind = kind
        self.on_event = on_event

    async def resolve(self, requested: str) -> Tuple[str, Optional[Resolution]]:
        """Return the concrete name for ``requested`` and how it was chosen."""
        if not is_latest_alias(requested):
            return requested, None

        resolver = LatestResolver(self.client, self.patterns, self.kind, self.on_event)
        resolution = await resolver.resolve()
        return resolution.name, resolution

    async def resolve_name(self, requested: str) -> str:
        """Return the concrete name for ``requested``."""
        name, _ = await self.resolve(requested)
        return name

    async def fetch(self, requested: str) -> LookupResult:
        """Resolve ``requested`` and fetch its metadata.

        A name that does not exist yields a result with ``exists`` false
        rather than an error.
        """
        name, resolution = await self.resolve(requested)
        info = await self.client.get_info(name, self.kind)

        if not info.exists:
            logger.warning("%s %r does not exist", self.kind.value.capitalize(), name)

        return LookupResult(
            requested=requested,
            resolved=name,
            kind=self.kind,
            resolution=resolution,
            info=info,
        )

