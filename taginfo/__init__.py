"""
taginfo resolves and inspects git tags and releases.

Repositories can be local clones or live on GitHub, Gitea or Bitbucket.
The name ``latest`` is resolved first (semantic versions, then dates,
then names), optionally narrowed by tag format patterns such as ``X.X.X``
or a regular expression. The result is a set of ``key=value`` outputs
ready for a GitHub Actions step.
"""

from __future__ import annotations

from taginfo.__version__ import __version__

__author__ = "taginfo Contributors"
__license__ = "Apache-2.0"
__description__ = "Resolve and inspect git tags and releases across hosting platforms."

from taginfo.core.resolver import LatestResolver, resolve_latest  # noqa: E402
from taginfo.core.lookup import TagLookup  # noqa: E402
from taginfo.core.repo_detector import detect_repository  # noqa: E402
from taginfo.sources import create_client  # noqa: E402

__all__ = [
    "__version__",
    "LatestResolver",
    "resolve_latest",
    "TagLookup",
    "detect_repository",
    "create_client",
]
