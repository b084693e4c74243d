"""Bitbucket Cloud backend."""

from __future__ import annotations

from typing import Any, List, Optional

import httpx

from taginfo.models.repository import RepoConfig
from taginfo.models.item import DatedItem, TagInfo, TagType
from taginfo.sources.base import HTTPRepositoryClient, quote_ref
from taginfo.constants import BITBUCKET_API_URL, PAGE_SIZE


class BitbucketClient(HTTPRepositoryClient):
    """Tags from the Bitbucket Cloud 2.0 API.

    Bitbucket has no releases. Tags point straight at commits, so
    ``tag_sha`` and ``commit_sha`` are the same hash, and no signature
    status is available.
    """

    platform = "bitbucket"

    def __init__(self, config: RepoConfig, **kwargs: Any) -> None:
        super().__init__(config, BITBUCKET_API_URL, **kwargs)

    def _auth(self) -> Optional[httpx.Auth]:
        # App passwords and access tokens go in the password slot
        if self.config.token:
            return httpx.BasicAuth("", self.config.token)
        return None

    @property
    def repo_url(self) -> str:
        return f"{self.api_url}/repositories/{self.config.owner}/{self.config.repo}"

    async def list_tags(self) -> List[DatedItem]:
        items: List[DatedItem] = []
        next_url: Optional[str] = f"{self.repo_url}/refs/tags?pagelen={PAGE_SIZE}"

        while next_url:
            data = await self._get_json(next_url) or {}
            values = data.get("values") or []
            if not values:
                break
            for tag in values:
                name = tag.get("name") or ""
                if not name:
                    continue
                target = tag.get("target") or {}
                items.append(DatedItem(name, target.get("date") or tag.get("date") or ""))
            next_url = data.get("next")

        return items

    async def get_tag_info(self, tag_name: str) -> TagInfo:
        data = await self._get_json(
            f"{self.repo_url}/refs/tags/{quote_ref(tag_name)}", missing_ok=True
        )
        if not data:
            return TagInfo.missing(tag_name)

        sha = (data.get("target") or {}).get("hash") or ""
        return TagInfo(
            exists=True,
            tag_name=tag_name,
            tag_sha=sha,
            tag_type=TagType.ANNOTATED if data.get("type") == "tag" else TagType.COMMIT,
            commit_sha=sha,
            tag_message=data.get("message") or "",
        )
