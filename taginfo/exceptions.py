"""
Errors raised by taginfo.

Everything derives from :class:`TagInfoError`, which the CLI turns into
``[ERROR] <message>`` and exit code 1. Context such as URLs, status codes
or git stderr goes into ``details`` rather than the message, so that
``str(exc)`` stays readable and ``-vv`` logs still have the full picture.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

_MAX_DETAIL_LENGTH = 200


def _clip(text: Optional[str]) -> Optional[str]:
    if text is None or len(text) <= _MAX_DETAIL_LENGTH:
        return text
    return text[:_MAX_DETAIL_LENGTH] + "..."


def _details(**fields: Any) -> Dict[str, Any]:
    """Keep the fields that were actually given, in argument order."""
    return {key: value for key, value in fields.items() if value is not None}


class TagInfoError(Exception):
    """Root of the taginfo error hierarchy.

    Args:
        message: What went wrong, phrased for the user.
        details: Extra key/value context; copied on construction.
    """

    __slots__ = ("message", "details")

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        if self.details:
            context = ", ".join(f"{key}={value}" for key, value in self.details.items())
            return f"{self.message} ({context})"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, details={self.details!r})"


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class ResolutionError(TagInfoError):
    """"latest" could not be turned into a concrete tag or release name."""


class EmptySourceError(ResolutionError):
    """The repository has no tags (or no releases) at all."""

    __slots__ = ("kind",)

    def __init__(self, kind: str = "tag") -> None:
        super().__init__(f"No {kind}s found in repository")
        self.kind = kind


class NoPatternMatchError(ResolutionError):
    """Candidates existed but none matched a tag format pattern.

    Args:
        patterns: Every pattern that was tried, in order; all of them are
            quoted in the message.
        kind: ``"tag"`` or ``"release"``.
    """

    __slots__ = ("patterns",)

    def __init__(self, patterns: Sequence[str], kind: str = "tag") -> None:
        self.patterns = list(patterns)
        quoted = ", ".join(f'"{pattern}"' for pattern in self.patterns)
        super().__init__(f"No {kind}s matched any format pattern: {quoted}")


class FormatParseError(TagInfoError):
    """A ``tag_format`` value is neither a pattern nor a JSON list of them."""

    __slots__ = ("raw_input",)

    def __init__(self, message: str, *, raw_input: Optional[str] = None) -> None:
        super().__init__(message, _details(input=_clip(raw_input)))
        self.raw_input = raw_input


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


class NetworkError(TagInfoError):
    """An HTTP request failed or returned something unusable.

    Args:
        message: What went wrong.
        url: Requested URL.
        status_code: HTTP status, when a response arrived.
        response_body: Body of that response; only a prefix is kept in
            ``details``.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            _details(url=url, status_code=status_code, response=_clip(response_body)),
        )
        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class SourceFetchError(NetworkError):
    """A platform backend could not list or look up tags and releases."""

    __slots__ = ("platform",)

    def __init__(self, message: str, *, platform: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.platform = platform
        self.details.update(_details(platform=platform))


class GitCommandError(TagInfoError):
    """A ``git`` subprocess exited non-zero, timed out or was not found.

    Args:
        message: What went wrong.
        command: Arguments passed to git.
        returncode: Exit status, if the process ran.
        stderr: Captured error output.
    """

    __slots__ = ("command", "returncode", "stderr")

    def __init__(
        self,
        message: str,
        *,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ) -> None:
        self.command = list(command or [])
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            message,
            _details(
                command=" ".join(self.command) or None,
                returncode=returncode,
                stderr=_clip(stderr.strip()) if stderr else None,
            ),
        )


class UnsupportedOperationError(TagInfoError):
    """The backend cannot do this, e.g. releases of a local clone."""

    __slots__ = ("platform",)

    def __init__(self, message: str, *, platform: Optional[str] = None) -> None:
        super().__init__(message, _details(platform=platform))
        self.platform = platform


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class RepositoryConfigError(TagInfoError):
    """No repository could be determined from the options and environment."""


class ConfigError(TagInfoError):
    """A settings file or option value is unreadable or out of range.

    Args:
        message: What went wrong.
        config_path: File the value came from.
        option: Offending option name.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        super().__init__(message, _details(path=config_path, option=option))
        self.config_path = config_path
        self.option = option
