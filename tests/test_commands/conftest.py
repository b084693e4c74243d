from __future__ import annotations

import logging
from typing import Dict, Generator, List, Tuple
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from taginfo.models.item import DatedItem, ReleaseInfo, TagInfo, TagType
from taginfo.sources.base import RepositoryClient
from taginfo.utils.console import reconfigure_console


class StubClient(RepositoryClient):
    """Backend serving fixed tags and releases."""

    platform = "stub"

    def __init__(
        self,
        tags: Dict[str, str],
        releases: Tuple[str, ...] = (),
        messages: Dict[str, str] = None,
    ) -> None:
        self.tags = tags
        self.releases = releases
        self.messages = messages or {}
        self.closed = False

    async def close(self) -> None:
        self.closed = True

    async def list_tags(self) -> List[DatedItem]:
        return [DatedItem(name, date) for name, date in self.tags.items()]

    async def get_tag_info(self, tag_name: str) -> TagInfo:
        if tag_name not in self.tags:
            return TagInfo.missing(tag_name)
        message = self.messages.get(tag_name, "")
        return TagInfo(
            exists=True,
            tag_name=tag_name,
            tag_sha="1" * 40,
            tag_type=TagType.ANNOTATED if message else TagType.COMMIT,
            commit_sha="2" * 40,
            tag_message=message,
        )

    async def list_releases(self) -> List[DatedItem]:
        return [DatedItem(name, "") for name in self.releases]

    async def get_release_info(self, tag_name: str) -> ReleaseInfo:
        if tag_name not in self.releases:
            return ReleaseInfo.missing(tag_name)
        return ReleaseInfo(exists=True, tag_name=tag_name, release_id=1, name=f"Release {tag_name}")


@pytest.fixture
def stub_client() -> StubClient:
    return StubClient(
        {"v1.0.0": "", "v1.2.0": "", "nightly": "2024-05-01T00:00:00Z"},
        releases=("v1.0.0", "v1.1.0"),
        messages={"v1.2.0": "Second release\nwith notes"},
    )


@pytest.fixture
def patched_client(stub_client: StubClient) -> Generator[StubClient, None, None]:
    """Make both commands talk to ``stub_client``."""
    with patch("taginfo.commands.info.create_client", return_value=stub_client), patch(
        "taginfo.commands.latest.create_client", return_value=stub_client
    ):
        yield stub_client


@pytest.fixture
def runner(tmp_path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """CliRunner in an empty directory with a clean environment."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "TAGINFO_CONFIG",
        "TAGINFO_TOKEN",
        "GITHUB_TOKEN",
        "GITHUB_REPOSITORY",
        "GITHUB_OUTPUT",
        "NO_COLOR",
    ):
        monkeypatch.delenv(var, raising=False)
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Drop handlers bound to the runner's streams after each invocation."""
    yield
    root = logging.getLogger("taginfo")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
    reconfigure_console()
