"""Local working copy backend driven by the ``git`` executable."""

from __future__ import annotations

import asyncio
from typing import List, Sequence, Tuple

from taginfo.models.item import DatedItem, TagInfo, TagType
from taginfo.sources.base import RepositoryClient
from taginfo.exceptions import GitCommandError
from taginfo.utils.logger import get_logger
from taginfo.constants import GIT_COMMAND_TIMEOUT

logger = get_logger("sources.local")

_DATED_REF_FORMAT = "%(refname:strip=2)%09%(creatordate:iso-strict)"


class LocalGitClient(RepositoryClient):
    """Tags of a repository on disk.

    Local repositories have tags only; release operations raise
    :class:`~taginfo.exceptions.UnsupportedOperationError`.

    Args:
        path: Path of the working copy (or bare repository).
        timeout: Seconds allowed for each ``git`` invocation.
    """

    platform = "local"

    def __init__(self, path: str, *, timeout: float = GIT_COMMAND_TIMEOUT) -> None:
        self.path = path
        self.timeout = timeout

    async def _run(self, *args: str) -> asyncio.subprocess.Process:
        try:
            return await asyncio.create_subprocess_exec(
                "git",
                *args,
                cwd=self.path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise GitCommandError(
                f"Could not run git in {self.path}: {exc}",
                command=["git", *args],
            ) from exc

    async def _communicate(self, args: Sequence[str]) -> Tuple[int, str, str]:
        process = await self._run(*args)
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), self.timeout)
        except asyncio.TimeoutError as exc:
            process.kill()
            await process.wait()
            raise GitCommandError(
                f"git timed out after {self.timeout}s",
                command=["git", *args],
            ) from exc

        return (
            process.returncode if process.returncode is not None else -1,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def git(self, *args: str) -> str:
        """Run ``git`` and return its trimmed stdout.

        Raises:
            GitCommandError: git could not be started, timed out or exited
                with a non-zero status.
        """
        logger.debug("Running git %s in %s", " ".join(args), self.path)
        returncode, stdout, stderr = await self._communicate(args)
        if returncode != 0:
            raise GitCommandError(
                f"git {args[0]} failed",
                command=["git", *args],
                returncode=returncode,
                stderr=stderr,
            )
        return stdout.strip()

    async def succeeds(self, *args: str) -> bool:
        """Run ``git`` and report only whether it exited with status 0."""
        returncode, _, _ = await self._communicate(args)
        return returncode == 0

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    async def list_tag_names(self) -> List[str]:
        output = await self.git("tag", "-l")
        return [line.strip() for line in output.splitlines() if line.strip()]

    async def list_tags(self) -> List[DatedItem]:
        output = await self.git("for-each-ref", f"--format={_DATED_REF_FORMAT}", "refs/tags")
        items = []
        for line in output.splitlines():
            name, _, date = line.partition("\t")
            if name.strip():
                items.append(DatedItem(name.strip(), date.strip()))
        return items

    async def get_tag_info(self, tag_name: str) -> TagInfo:
        ref = f"refs/tags/{tag_name}"
        if not await self.succeeds("rev-parse", "--verify", "--quiet", ref):
            return TagInfo.missing(tag_name)

        tag_sha = await self.git("rev-parse", ref)
        try:
            commit_sha = await self.git("rev-parse", f"{ref}^{{commit}}")
        except GitCommandError:
            # a tag of a tree or blob has no commit
            commit_sha = tag_sha

        annotated = await self.git("cat-file", "-t", ref) == "tag"
        message = ""
        if annotated:
            message = await self.git("tag", "-l", "--format=%(contents)", tag_name)

        return TagInfo(
            exists=True,
            tag_name=tag_name,
            tag_sha=tag_sha,
            tag_type=TagType.ANNOTATED if annotated else TagType.COMMIT,
            commit_sha=commit_sha,
            tag_message=message,
            verified=await self.succeeds("verify-tag", tag_name),
        )
