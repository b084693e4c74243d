from __future__ import annotations

from typing import Any, Callable, Dict
from unittest.mock import MagicMock

import httpx
import pytest

from taginfo.exceptions import UnsupportedOperationError
from taginfo.models.item import DatedItem, ItemKind, TagType
from taginfo.models.repository import Platform, RepoConfig
from taginfo.sources.bitbucket import BitbucketClient

API = "https://api.bitbucket.org/2.0/repositories/team/widget"

HttpFactory = Callable[[Dict[str, Any]], MagicMock]


def make_config(**overrides: Any) -> RepoConfig:
    values: Dict[str, Any] = dict(
        type="remote", platform=Platform.BITBUCKET, owner="team", repo="widget"
    )
    values.update(overrides)
    return RepoConfig(**values)


@pytest.mark.unit
class TestBitbucketClientSetup:
    """Tests for client construction."""

    def test_token_uses_basic_auth(self) -> None:
        """Test tokens are sent as the basic-auth password."""
        client = BitbucketClient(make_config(token="app-pass"))

        assert isinstance(client.http.auth, httpx.BasicAuth)
        assert "Authorization" not in client.http.headers

    def test_anonymous(self) -> None:
        """Test no auth is configured without a token."""
        client = BitbucketClient(make_config())

        assert client.http.auth is None

    def test_repo_url(self, routed_http: HttpFactory) -> None:
        """Test Bitbucket's repositories path is used."""
        client = BitbucketClient(make_config(), http=routed_http({}))

        assert client.repo_url == API


@pytest.mark.unit
class TestBitbucketTags:
    """Tests for Bitbucket tag operations."""

    @pytest.mark.asyncio
    async def test_list_tags_follows_next(self, routed_http: HttpFactory) -> None:
        """Test pagination follows the ``next`` link."""
        page2 = f"{API}/refs/tags?pagelen=100&page=2"
        http = routed_http(
            {
                f"{API}/refs/tags?pagelen=100": {
                    "values": [
                        {"name": "v1", "target": {"date": "2024-01-01T00:00:00+00:00"}},
                        {"name": "v2", "date": "2024-02-01T00:00:00+00:00"},
                    ],
                    "next": page2,
                },
                page2: {"values": [{"name": "v3", "target": {}}]},
            }
        )

        items = await BitbucketClient(make_config(), http=http).list_dated(ItemKind.TAG)

        assert items == [
            DatedItem("v1", "2024-01-01T00:00:00+00:00"),
            DatedItem("v2", "2024-02-01T00:00:00+00:00"),
            DatedItem("v3", ""),
        ]

    @pytest.mark.asyncio
    async def test_empty_page_stops(self, routed_http: HttpFactory) -> None:
        """Test an empty values list ends the listing."""
        http = routed_http({f"{API}/refs/tags?pagelen=100": {"values": [], "next": "ignored"}})

        assert await BitbucketClient(make_config(), http=http).list_tags() == []

    @pytest.mark.asyncio
    async def test_tag_info(self, routed_http: HttpFactory) -> None:
        """Test tag and commit sha are both the target hash."""
        http = routed_http(
            {
                f"{API}/refs/tags/v1": {
                    "name": "v1",
                    "type": "tag",
                    "message": "first\n",
                    "target": {"hash": "deadbeef"},
                }
            }
        )

        info = await BitbucketClient(make_config(), http=http).get_tag_info("v1")

        assert info.exists
        assert info.tag_type is TagType.ANNOTATED
        assert info.tag_sha == info.commit_sha == "deadbeef"
        assert info.tag_message == "first\n"
        assert info.verified is False

    @pytest.mark.asyncio
    async def test_missing_tag(self, routed_http: HttpFactory) -> None:
        """Test a 404 is a missing tag."""
        info = await BitbucketClient(make_config(), http=routed_http({})).get_tag_info("v0")

        assert info.exists is False

    @pytest.mark.asyncio
    async def test_releases_unsupported(self, routed_http: HttpFactory) -> None:
        """Test Bitbucket rejects release operations."""
        client = BitbucketClient(make_config(), http=routed_http({}))

        with pytest.raises(UnsupportedOperationError, match="bitbucket"):
            await client.list_dated(ItemKind.RELEASE)
