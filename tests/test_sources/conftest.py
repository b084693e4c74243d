from __future__ import annotations

from typing import Any, Callable, Dict, Iterable
from unittest.mock import AsyncMock, MagicMock

import pytest

from taginfo.exceptions import NetworkError
from taginfo.utils.http import HTTPClient


@pytest.fixture
def routed_http() -> Callable[[Dict[str, Any]], MagicMock]:
    """Factory for an HTTPClient double answering from a URL map.

    A route mapped to an exception instance raises it; unknown URLs
    answer 404 the way :class:`HTTPClient` reports it.
    """

    def factory(routes: Dict[str, Any]) -> MagicMock:
        async def get_json(url: str, **kwargs: Any) -> Any:
            if url not in routes:
                raise NetworkError(f"HTTP 404 error for {url}", url=url, status_code=404)
            result = routes[url]
            if isinstance(result, Exception):
                raise result
            return result

        async def batch_get_json(urls: Iterable[str], **kwargs: Any) -> Dict[str, Any]:
            return {url: routes.get(url) for url in urls}

        http = MagicMock(spec=HTTPClient)
        http.get_json = AsyncMock(side_effect=get_json)
        http.batch_get_json = AsyncMock(side_effect=batch_get_json)
        http.close = AsyncMock()
        return http

    return factory
