"""GitHub and GitHub Enterprise backend."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from taginfo.models.repository import RepoConfig
from taginfo.models.item import DatedItem, ItemKind, ReleaseInfo, TagInfo
from taginfo.sources.base import (
    HTTPRepositoryClient,
    dated_releases,
    quote_ref,
    release_info_from_json,
)
from taginfo.utils.logger import get_logger
from taginfo.constants import (
    GITHUB_ACCEPT,
    GITHUB_API_URL,
    GITHUB_ENTERPRISE_API_PATH,
    PAGE_SIZE,
)

logger = get_logger("sources.github")


def github_api_url(base_url: Optional[str]) -> str:
    """API root for github.com or a GitHub Enterprise server."""
    if not base_url:
        return GITHUB_API_URL
    base = base_url.rstrip("/")
    if base.endswith(GITHUB_ENTERPRISE_API_PATH) or "api.github.com" in base:
        return base
    return base + GITHUB_ENTERPRISE_API_PATH


class GitHubClient(HTTPRepositoryClient):
    """Tags and releases from the GitHub REST API.

    Tag names come from ``/tags``, which is cheap but carries no dates.
    Dates need one ``/git/commits/{sha}`` call per tag, so they are only
    fetched when the resolver asks for the dated listing.
    """

    platform = "github"

    def __init__(self, config: RepoConfig, **kwargs: Any) -> None:
        super().__init__(config, github_api_url(config.base_url), **kwargs)

    def _default_headers(self) -> Dict[str, str]:
        headers = {"Accept": GITHUB_ACCEPT}
        if self.config.token:
            headers["Authorization"] = f"token {self.config.token}"
        return headers

    def supports_name_listing(self, kind: ItemKind) -> bool:
        return kind is ItemKind.TAG

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    async def _tag_objects(self) -> List[Dict[str, Any]]:
        """Raw ``/tags`` entries, newest pages first, at most ``max_tags``."""
        per_page = min(PAGE_SIZE, self.max_tags)
        tags: List[Dict[str, Any]] = []
        page = 1

        while len(tags) < self.max_tags:
            batch = await self._get_json(
                f"{self.repo_url}/tags?per_page={per_page}&page={page}"
            )
            if not batch:
                break
            tags.extend(batch)
            if len(batch) < per_page:
                break
            page += 1

        return tags[: self.max_tags]

    async def list_tag_names(self) -> List[str]:
        return [tag["name"] for tag in await self._tag_objects() if tag.get("name")]

    async def list_tags(self) -> List[DatedItem]:
        tags = [tag for tag in await self._tag_objects() if tag.get("name")]

        commit_urls: Dict[str, str] = {}
        for tag in tags:
            sha = (tag.get("commit") or {}).get("sha")
            if sha:
                commit_urls[tag["name"]] = f"{self.repo_url}/git/commits/{sha}"

        commits = await self.http.batch_get_json(commit_urls.values())

        items = []
        for tag in tags:
            commit = commits.get(commit_urls.get(tag["name"], "")) or {}
            date = (commit.get("committer") or {}).get("date") or ""
            items.append(DatedItem(tag["name"], date))

        logger.debug("Listed %d tag(s) with dates from %s", len(items), self.config.describe())
        return items

    async def get_tag_info(self, tag_name: str) -> TagInfo:
        return await self._tag_info_from_refs(tag_name)

    def _is_verified(self, tag_data: Dict[str, Any]) -> bool:
        return bool((tag_data.get("verification") or {}).get("verified"))

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    async def list_releases(self) -> List[DatedItem]:
        items: List[DatedItem] = []
        page = 1

        while True:
            batch = await self._get_json(
                f"{self.repo_url}/releases?per_page={PAGE_SIZE}&page={page}"
            )
            if not batch:
                break
            items.extend(dated_releases(batch))
            if len(batch) < PAGE_SIZE:
                break
            page += 1

        return items

    async def get_release_info(self, tag_name: str) -> ReleaseInfo:
        data = await self._get_json(
            f"{self.repo_url}/releases/tags/{quote_ref(tag_name)}", missing_ok=True
        )
        if not data:
            return ReleaseInfo.missing(tag_name)
        return release_info_from_json(tag_name, data)
