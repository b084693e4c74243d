"""Common interface for repository backends.

Every backend lists tags (and, where the platform has them, releases) and
looks up metadata for a single name. :class:`RepositoryClient` also
implements the two listing calls the resolver depends on, ``list_names``
and ``list_dated``, in terms of the per-kind operations.

Remote backends derive from :class:`HTTPRepositoryClient`, which owns an
:class:`~taginfo.utils.http.HTTPClient` and translates transport failures
into :class:`~taginfo.exceptions.SourceFetchError`.
"""

from __future__ import annotations

import abc
from urllib.parse import quote
from typing import Any, Dict, List, Optional, Union

import httpx

from taginfo.models.repository import RepoConfig
from taginfo.models.item import DatedItem, ItemKind, ReleaseInfo, TagInfo, TagType
from taginfo.exceptions import NetworkError, SourceFetchError, UnsupportedOperationError
from taginfo.utils.http import HTTPClient
from taginfo.utils.logger import get_logger
from taginfo.constants import DEFAULT_MAX_TAGS

logger = get_logger("sources")

__all__ = ["RepositoryClient", "HTTPRepositoryClient", "ItemInfo"]

ItemInfo = Union[TagInfo, ReleaseInfo]


class RepositoryClient(abc.ABC):
    """Abstract repository backend.

    Instances are async context managers; leaving the context releases any
    network resources.
    """

    #: Name used in log messages and errors.
    platform: str = "repository"

    async def __aenter__(self) -> "RepositoryClient":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release resources held by the backend."""

    # ------------------------------------------------------------------
    # Resolver contract
    # ------------------------------------------------------------------

    def supports_name_listing(self, kind: ItemKind) -> bool:
        """Whether a names-only listing cheaper than ``list_dated`` exists."""
        return False

    async def list_names(self, kind: ItemKind) -> List[str]:
        """List names without dates."""
        if kind is ItemKind.RELEASE:
            return [item.name for item in await self.list_releases()]
        return await self.list_tag_names()

    async def list_dated(self, kind: ItemKind) -> List[DatedItem]:
        """List names with their dates (``""`` when unknown)."""
        if kind is ItemKind.RELEASE:
            return await self.list_releases()
        return await self.list_tags()

    async def get_info(self, name: str, kind: ItemKind) -> ItemInfo:
        """Look up ``name`` as a tag or a release."""
        if kind is ItemKind.RELEASE:
            return await self.get_release_info(name)
        return await self.get_tag_info(name)

    # ------------------------------------------------------------------
    # Backend operations
    # ------------------------------------------------------------------

    async def list_tag_names(self) -> List[str]:
        return [item.name for item in await self.list_tags()]

    @abc.abstractmethod
    async def list_tags(self) -> List[DatedItem]:
        """List every tag with its date."""

    @abc.abstractmethod
    async def get_tag_info(self, tag_name: str) -> TagInfo:
        """Fetch metadata for ``tag_name``; missing tags are not an error."""

    async def list_releases(self) -> List[DatedItem]:
        """List published releases by tag name with their dates."""
        raise UnsupportedOperationError(
            f"Releases are not supported for {self.platform} repositories",
            platform=self.platform,
        )

    async def get_release_info(self, tag_name: str) -> ReleaseInfo:
        """Fetch metadata for the release of ``tag_name``."""
        raise UnsupportedOperationError(
            f"Releases are not supported for {self.platform} repositories",
            platform=self.platform,
        )


class HTTPRepositoryClient(RepositoryClient):
    """Base for backends that talk to a hosting platform's REST API.

    Args:
        config: Remote repository configuration.
        api_url: API root, without a trailing slash.
        http: Pre-built HTTP client. When omitted one is created from
            ``http_options`` and closed with this backend.
        max_tags: Upper bound for tag listings that support it.
        **http_options: Forwarded to :class:`HTTPClient` (``timeout``,
            ``max_retries``, ``max_concurrency``...).
    """

    def __init__(
        self,
        config: RepoConfig,
        api_url: str,
        *,
        http: Optional[HTTPClient] = None,
        max_tags: int = DEFAULT_MAX_TAGS,
        **http_options: Any,
    ) -> None:
        self.config = config
        self.api_url = api_url.rstrip("/")
        self.max_tags = max_tags
        self._owns_http = http is None
        self.http = http or HTTPClient(
            verify_ssl=not config.ignore_cert_errors,
            headers=self._default_headers(),
            auth=self._auth(),
            **http_options,
        )

    def _default_headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def _auth(self) -> Optional[httpx.Auth]:
        return None

    @property
    def repo_url(self) -> str:
        """API URL of the repository itself."""
        return f"{self.api_url}/repos/{self.config.owner}/{self.config.repo}"

    async def close(self) -> None:
        if self._owns_http:
            await self.http.close()

    async def _get_json(self, url: str, *, missing_ok: bool = False) -> Any:
        """GET ``url`` as JSON.

        Returns ``None`` for a 404 when ``missing_ok`` is set; every other
        failure becomes :class:`SourceFetchError`.
        """
        logger.debug("GET %s", url)
        try:
            return await self.http.get_json(url)
        except NetworkError as exc:
            if missing_ok and exc.status_code == 404:
                return None
            raise SourceFetchError(
                f"{self.platform} API request failed: {exc.message}",
                platform=self.platform,
                url=exc.url or url,
                status_code=exc.status_code,
                response_body=exc.response_body,
            ) from exc

    async def _tag_info_from_refs(self, tag_name: str) -> TagInfo:
        """Resolve a tag through the ``git/refs`` and ``git/tags`` endpoints.

        Shared by GitHub and Gitea, whose git data APIs have the same shape.
        """
        ref_data = await self._get_json(
            f"{self.repo_url}/git/refs/tags/{quote_ref(tag_name)}", missing_ok=True
        )
        ref = _pick_ref(ref_data, tag_name)
        if ref is None:
            return TagInfo.missing(tag_name)

        target = ref.get("object") or {}
        object_sha = target.get("sha") or ""
        info = TagInfo(
            exists=True,
            tag_name=tag_name,
            tag_sha=object_sha,
            commit_sha=object_sha,
        )

        if target.get("type") == "tag" and object_sha:
            tag_data = await self._get_json(
                f"{self.repo_url}/git/tags/{object_sha}", missing_ok=True
            )
            if tag_data:
                info.tag_type = TagType.ANNOTATED
                info.commit_sha = (tag_data.get("object") or {}).get("sha") or object_sha
                info.tag_message = tag_data.get("message") or ""
                info.verified = self._is_verified(tag_data)

        return info

    def _is_verified(self, tag_data: Dict[str, Any]) -> bool:
        return False


# ---------------------------------------------------------------------------
# Shared JSON helpers
# ---------------------------------------------------------------------------


def quote_ref(name: str) -> str:
    """Percent-encode a tag name for use in a URL path, keeping ``/``."""
    return quote(name, safe="/")


def _pick_ref(data: Any, tag_name: str) -> Optional[Dict[str, Any]]:
    # refs endpoints answer with a list of prefix matches when the exact
    # ref does not exist
    wanted = f"refs/tags/{tag_name}"
    if isinstance(data, dict):
        return data if data.get("ref", wanted) == wanted else None
    if isinstance(data, list):
        for ref in data:
            if isinstance(ref, dict) and ref.get("ref") == wanted:
                return ref
    return None


def release_date(data: Dict[str, Any]) -> str:
    """Publication date of a release payload, falling back to creation."""
    return data.get("published_at") or data.get("created_at") or ""


def release_info_from_json(tag_name: str, data: Dict[str, Any]) -> ReleaseInfo:
    """Build :class:`ReleaseInfo` from a GitHub or Gitea release payload."""
    return ReleaseInfo(
        exists=True,
        tag_name=data.get("tag_name") or tag_name,
        release_id=data.get("id"),
        name=data.get("name") or "",
        body=data.get("body") or "",
        draft=bool(data.get("draft")),
        prerelease=bool(data.get("prerelease")),
        published_at=release_date(data),
        html_url=data.get("html_url") or "",
    )


def dated_releases(payload: Any) -> List[DatedItem]:
    """Published releases of one page as dated items, drafts skipped."""
    items: List[DatedItem] = []
    for release in payload or []:
        if release.get("draft") or not release.get("tag_name"):
            continue
        items.append(DatedItem(release["tag_name"], release_date(release)))
    return items
