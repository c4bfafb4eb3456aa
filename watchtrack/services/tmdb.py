from __future__ import annotations

import logging
from typing import Any

import httpx

from watchtrack.core.config import Settings, settings

logger = logging.getLogger(__name__)

_SEARCH_MULTI_PATH = "/search/multi"
_ERROR_BODY_LOG_LIMIT = 500


class TMDBError(RuntimeError):
    pass


class TMDBConfigurationError(TMDBError):
    pass


class TMDBTransportError(TMDBError):
    pass


class TMDBNetworkError(TMDBTransportError):
    pass


class TMDBTimeoutError(TMDBNetworkError):
    pass


class TMDBStatusError(TMDBTransportError):
    def __init__(self, status_code: int, reason: str = "") -> None:
        super().__init__(f"TMDB responded {status_code} {reason}".rstrip())
        self.status_code = status_code


class TMDBDecodeError(TMDBTransportError):
    pass


class TMDBEnvelopeError(TMDBError):
    pass


class TMDBSearchClient:
    """One-shot client for the TMDB multi-search endpoint.

    The key is only ever placed on the outgoing request. Responses are never
    cached; every call issues exactly one request.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://api.themoviedb.org/3",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise TMDBConfigurationError("TMDB_API_KEY missing")
        self._api_key = api_key.strip()
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        config: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "TMDBSearchClient":
        config = config or settings
        return cls(
            config.tmdb_api_key,
            base_url=config.tmdb_api_base_url,
            timeout=config.tmdb_timeout_seconds,
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    async def search_multi(self, query: str) -> Any:
        params = {
            "query": query,
            "include_adult": "false",
            "language": "en-US",
            "page": 1,
        }

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                r = await client.get(
                    _SEARCH_MULTI_PATH,
                    params=params,
                    headers={**self._headers(), "Cache-Control": "no-store"},
                )
        except httpx.TimeoutException as exc:
            raise TMDBTimeoutError(f"TMDB request timed out after {self._timeout}s") from exc
        except httpx.HTTPError as exc:
            raise TMDBNetworkError(f"TMDB request failed: {exc.__class__.__name__}") from exc

        if not r.is_success:
            logger.warning(
                "TMDB API error status=%s body=%s",
                r.status_code,
                r.text[:_ERROR_BODY_LOG_LIMIT],
            )
            raise TMDBStatusError(r.status_code, r.reason_phrase)

        try:
            return r.json()
        except ValueError as exc:
            raise TMDBDecodeError("TMDB response body is not valid JSON") from exc


def tmdb_image_url(
    path: str | None,
    size: str = "w500",
    *,
    base_url: str | None = None,
) -> str | None:
    if not path:
        return None
    base = base_url if base_url is not None else settings.tmdb_image_base_url
    return f"{base}{size}{path}"
