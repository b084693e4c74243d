"""Gitea (and Forgejo) backend."""

from __future__ import annotations

from typing import Any, Dict, List

from taginfo.models.repository import RepoConfig
from taginfo.models.item import DatedItem, ReleaseInfo, TagInfo
from taginfo.sources.base import (
    HTTPRepositoryClient,
    dated_releases,
    quote_ref,
    release_info_from_json,
)
from taginfo.exceptions import RepositoryConfigError
from taginfo.constants import GITEA_API_PATH, PAGE_SIZE


class GiteaClient(HTTPRepositoryClient):
    """Tags and releases from a Gitea instance's ``/api/v1``.

    The tag listing already embeds commit dates, so there is no separate
    names-only call. Gitea does not report signature verification for
    tags; ``verified`` is always false.
    """

    platform = "gitea"

    def __init__(self, config: RepoConfig, **kwargs: Any) -> None:
        if not config.base_url:
            raise RepositoryConfigError(
                "Gitea repositories require a base URL",
                {"repository": config.describe()},
            )
        super().__init__(config, config.base_url.rstrip("/") + GITEA_API_PATH, **kwargs)

    def _default_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.token:
            headers["Authorization"] = f"token {self.config.token}"
        return headers

    async def _paged(self, endpoint: str) -> List[Dict[str, Any]]:
        """Collect ``limit``/``page`` results until a short page."""
        results: List[Dict[str, Any]] = []
        page = 1

        while True:
            batch = await self._get_json(
                f"{self.repo_url}/{endpoint}?limit={PAGE_SIZE}&page={page}"
            )
            if not isinstance(batch, list) or not batch:
                break
            results.extend(batch)
            if len(batch) < PAGE_SIZE:
                break
            page += 1

        return results

    async def list_tags(self) -> List[DatedItem]:
        items = []
        for tag in await self._paged("tags"):
            name = tag.get("name") or ""
            if not name:
                continue
            commit = tag.get("commit") or {}
            items.append(DatedItem(name, commit.get("created") or commit.get("timestamp") or ""))
        return items

    async def get_tag_info(self, tag_name: str) -> TagInfo:
        return await self._tag_info_from_refs(tag_name)

    async def list_releases(self) -> List[DatedItem]:
        return dated_releases(await self._paged("releases"))

    async def get_release_info(self, tag_name: str) -> ReleaseInfo:
        data = await self._get_json(
            f"{self.repo_url}/releases/tags/{quote_ref(tag_name)}", missing_ok=True
        )
        if not data:
            return ReleaseInfo.missing(tag_name)
        return release_info_from_json(tag_name, data)
