from __future__ import annotations

import pytest

from taginfo.models.repository import Platform, RepoConfig


@pytest.mark.unit
class TestPlatform:
    """Tests for Platform."""

    def test_values(self) -> None:
        """Test values lists every platform in declaration order."""
        assert Platform.values() == ["github", "gitea", "bitbucket"]


@pytest.mark.unit
class TestRepoConfig:
    """Tests for RepoConfig."""

    def test_local(self) -> None:
        """Test local configs describe their path."""
        config = RepoConfig(type="local", path="/work/repo")

        assert config.is_local is True
        assert config.is_remote is False
        assert config.describe() == "local:/work/repo"

    def test_remote(self) -> None:
        """Test remote configs describe platform and location."""
        config = RepoConfig(type="remote", platform=Platform.GITHUB, owner="octo", repo="cat")

        assert config.is_remote is True
        assert config.describe() == "github:octo/cat"

    def test_remote_with_base_url(self) -> None:
        """Test the instance URL is included when set."""
        config = RepoConfig(
            type="remote",
            platform=Platform.GITEA,
            owner="org",
            repo="app",
            base_url="https://git.example.com",
        )

        assert config.describe() == "gitea:https://git.example.com/org/app"

    def test_token_hidden(self) -> None:
        """Test the token never shows up in repr or describe."""
        config = RepoConfig(
            type="remote",
            platform=Platform.GITHUB,
            owner="o",
            repo="r",
            token="ghp_supersecret",
        )

        assert "ghp_supersecret" not in repr(config)
        assert "ghp_supersecret" not in config.describe()
