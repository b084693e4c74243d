"""Resolution of the symbolic ``latest`` reference to a concrete name.

The resolver applies a layered policy to the candidates a source returns:

1. **Format filtering**: patterns are tried in order and the first one
   that selects anything replaces the working set.
2. **Semantic versions**: if any candidate is a semver, the highest wins.
   No dates are needed on this path.
3. **Dates**: otherwise the most recently dated candidate wins.
4. **Alphabetical**: with no usable dates, the lexicographic maximum is
   returned as a best effort.

Candidate listing is a two-phase strategy (:class:`CandidateFetch`): a
cheap names-only listing where the source offers one, and the full dated
listing when it does not, when it fails, or when dates turn out to be
needed.

The resolver never logs directly. Progress notes are emitted as
:class:`ResolutionEvent` records to an ``on_event`` callback, which
defaults to :func:`log_event`.

Typical usage::

    from taginfo.sources import create_client

    async with create_client(config) as client:
        resolution = await LatestResolver(client, patterns=["X.X.X"]).resolve()
        print(resolution.name, resolution.strategy.value)
"""

from __future__ import annotations

import re
import logging
from enum import Enum
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from taginfo.models.item import DatedItem, ItemKind
from taginfo.exceptions import EmptySourceError, NetworkError, NoPatternMatchError
from taginfo.core.semver import is_semver, sort_tags_by_semver
from taginfo.core.format_matcher import filter_with_fallback
from taginfo.utils.logger import get_logger

logger = get_logger("resolver")

# fromisoformat before 3.11 only takes 3 or 6 fractional digits
_FRACTION_RE = re.compile(r"(?<=:\d\d)\.(\d+)", re.ASCII)

__all__ = [
    "ResolutionStrategy",
    "Resolution",
    "ResolutionEvent",
    "EventCallback",
    "CandidateSource",
    "Candidates",
    "CandidateFetch",
    "LatestResolver",
    "log_event",
    "resolve_latest",
    "parse_timestamp",
]


class ResolutionStrategy(str, Enum):
    """Rule that picked the winning name."""

    SEMVER = "semver"
    DATE = "date"
    ALPHABETICAL = "alphabetical"


@dataclass
class Resolution:
    """Outcome of a successful resolution.

    Attributes:
        name: The winning tag or release name.
        strategy: Which rule selected it.
        pattern: Format pattern that produced the working set, if any.
        candidates: Size of the working set the winner was chosen from.
    """

    name: str
    strategy: ResolutionStrategy
    pattern: Optional[str] = None
    candidates: int = 0


@dataclass(frozen=True)
class ResolutionEvent:
    """A progress note emitted during resolution.

    Attributes:
        level: A :mod:`logging` level such as ``logging.INFO``.
        message: Human-readable text.
    """

    level: int
    message: str


EventCallback = Callable[[ResolutionEvent], None]


def log_event(event: ResolutionEvent) -> None:
    """Default observer: forward the event to the ``taginfo.resolver`` logger."""
    logger.log(event.level, "%s", event.message)


class CandidateSource(Protocol):
    """What the resolver needs from a repository backend."""

    def supports_name_listing(self, kind: ItemKind) -> bool: ...

    async def list_names(self, kind: ItemKind) -> List[str]: ...

    async def list_dated(self, kind: ItemKind) -> List[DatedItem]: ...


# ---------------------------------------------------------------------------
# Candidate listing
# ---------------------------------------------------------------------------


@dataclass
class Candidates:
    """Names returned by the first listing phase.

    ``dated`` is set when the names came from the full dated listing, so
    the second phase can reuse it instead of fetching again.
    """

    names: List[str]
    dated: Optional[List[DatedItem]] = None

    @property
    def has_dates(self) -> bool:
        return self.dated is not None


class CandidateFetch:
    """Two-phase listing: names-only when available, dated when needed.

    Args:
        source: Backend to list from.
        kind: Tags or releases.
        emit: Observer for progress events.
    """

    def __init__(self, source: CandidateSource, kind: ItemKind, emit: EventCallback) -> None:
        self.source = source
        self.kind = kind
        self.emit = emit

    async def names(self) -> Candidates:
        """First phase: list candidate names as cheaply as possible.

        A failing names-only listing is reported as a warning event and
        replaced by the dated listing. A failing dated listing propagates.
        """
        if self.source.supports_name_listing(self.kind):
            try:
                names = await self.source.list_names(self.kind)
            except NetworkError as exc:
                self.emit(
                    ResolutionEvent(
                        logging.WARNING,
                        f"Names-only {self.kind.value} listing failed, "
                        f"falling back to full listing: {exc}",
                    )
                )
            else:
                self.emit(
                    ResolutionEvent(
                        logging.DEBUG,
                        f"Listed {len(names)} {self.kind.value} name(s) without dates",
                    )
                )
                return Candidates(names=list(names))

        dated = await self.source.list_dated(self.kind)
        return Candidates(names=[item.name for item in dated], dated=list(dated))

    async def dated(self, candidates: Candidates) -> List[DatedItem]:
        """Second phase: dated entries, fetched only if phase one lacked them."""
        if candidates.dated is not None:
            return candidates.dated
        self.emit(
            ResolutionEvent(
                logging.INFO,
                f"No semantic versions among {self.kind.value}s, fetching dates",
            )
        )
        return list(await self.source.list_dated(self.kind))


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class LatestResolver:
    """Resolve ``latest`` against one source.

    Each instance owns its working set for the duration of
    :meth:`resolve`; resolvers share no state with each other.

    Args:
        source: Backend implementing :class:`CandidateSource`.
        patterns: Format patterns tried in order, or ``None`` for no
            filtering.
        kind: Resolve against tags or releases.
        on_event: Observer for progress events. Defaults to
            :func:`log_event`.
    """

    def __init__(
        self,
        source: CandidateSource,
        patterns: Optional[Sequence[str]] = None,
        kind: ItemKind = ItemKind.TAG,
        on_event: Optional[EventCallback] = None,
    ) -> None:
        self.source = source
        self.patterns: List[str] = list(patterns or [])
        self.kind = kind
        self.on_event: EventCallback = on_event or log_event

    async def resolve(self) -> Resolution:
        """Run the resolution policy and return the winner.

        Raises:
            EmptySourceError: The source listed nothing.
            NoPatternMatchError: Patterns were given and none matched.
            NetworkError: The dated listing failed.
        """
        fetch = CandidateFetch(self.source, self.kind, self.on_event)
        candidates = await fetch.names()

        if not candidates.names:
            raise EmptySourceError(self.kind.value)

        pattern, working = self._apply_patterns(candidates.names)

        semver_names = [name for name in working if is_semver(name)]
        if semver_names:
            winner = sort_tags_by_semver(semver_names)[0]
            self._emit(logging.INFO, f"Resolved latest {self.kind.value} by semver: {winner}")
            return Resolution(winner, ResolutionStrategy.SEMVER, pattern, len(working))

        dated = await fetch.dated(candidates)
        winner = self._latest_by_date(dated, working)
        if winner is not None:
            self._emit(logging.INFO, f"Resolved latest {self.kind.value} by date: {winner}")
            return Resolution(winner, ResolutionStrategy.DATE, pattern, len(working))

        winner = max(working)
        self._emit(
            logging.WARNING,
            f"No semantic versions or dates available, "
            f"using alphabetical order: {winner}",
        )
        return Resolution(winner, ResolutionStrategy.ALPHABETICAL, pattern, len(working))

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _apply_patterns(self, names: List[str]) -> Tuple[Optional[str], List[str]]:
        if not self.patterns:
            return None, list(names)

        pattern, matches = filter_with_fallback(names, self.patterns)
        if pattern is None:
            raise NoPatternMatchError(self.patterns, self.kind.value)

        self._emit(
            logging.INFO,
            f'Format pattern "{pattern}" matched {len(matches)} of {len(names)} '
            f"{self.kind.value}(s)",
        )
        return pattern, matches

    def _latest_by_date(self, dated: Sequence[DatedItem], working: Sequence[str]) -> Optional[str]:
        allowed = set(working)
        stamped: List[Tuple[datetime, str]] = []

        for item in dated:
            if item.name not in allowed or not item.date:
                continue
            timestamp = parse_timestamp(item.date)
            if timestamp is None:
                self._emit(logging.DEBUG, f"Ignoring unparseable date {item.date!r} for {item.name}")
                continue
            stamped.append((timestamp, item.name))

        if not stamped:
            return None

        # sorted() is stable with reverse=True, so equal timestamps keep source order
        stamped.sort(key=lambda pair: pair[0], reverse=True)
        return stamped[0][1]

    def _emit(self, level: int, message: str) -> None:
        self.on_event(ResolutionEvent(level, message))


async def resolve_latest(
    source: CandidateSource,
    patterns: Optional[Sequence[str]] = None,
    kind: ItemKind = ItemKind.TAG,
    on_event: Optional[EventCallback] = None,
) -> str:
    """Resolve ``latest`` and return only the winning name."""
    resolution = await LatestResolver(source, patterns, kind, on_event).resolve()
    return resolution.name


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 date into an aware UTC datetime.

    A trailing ``Z`` is accepted and naive values are taken as UTC.
    Returns ``None`` for anything unparseable.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), text, count=1)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
