from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any

from pydantic import ValidationError

from watchtrack.schemas.tmdb import (
    PersonResult,
    SearchActionState,
    SearchEnvelope,
    SearchFailure,
    SearchResultItem,
    SearchSuccess,
    multi_search_item_adapter,
)
from watchtrack.services.tmdb import TMDBEnvelopeError, TMDBError, TMDBSearchClient

logger = logging.getLogger(__name__)

GENERIC_SEARCH_ERROR = "Failed to search. Please try again later."

SearchPipeline = Callable[[str], Awaitable[list[SearchResultItem]]]


def parse_search_envelope(payload: Any) -> SearchEnvelope:
    try:
        return SearchEnvelope.model_validate(payload)
    except ValidationError as exc:
        logger.warning("TMDB response envelope invalid: %s", exc.errors())
        raise TMDBEnvelopeError("Invalid overall data structure received from TMDB") from exc


def classify_search_results(results: Iterable[Any]) -> list[SearchResultItem]:
    out: list[SearchResultItem] = []
    for index, raw in enumerate(results):
        try:
            item = multi_search_item_adapter.validate_python(raw)
        except ValidationError as exc:
            logger.warning("Skipping invalid item in TMDB results index=%s: %s", index, exc.errors())
            continue

        if isinstance(item, PersonResult):
            logger.debug("Dropping person result id=%s", item.id)
            continue
        out.append(item)
    return out


def effective_year(item: SearchResultItem) -> int:
    year = item.date_string[:4]
    # ASCII four-digit prefix only: no signs, spaces or underscores.
    if len(year) == 4 and year.isascii() and year.isdigit():
        return int(year)
    return 0


def rank_search_results(items: Sequence[SearchResultItem]) -> list[SearchResultItem]:
    """Order by effective year, newest first.

    Items with an unknown year (0) are placed ahead of every dated item.
    Equal years keep their incoming order.
    """

    def _key(item: SearchResultItem) -> tuple[bool, int]:
        year = effective_year(item)
        return (year == 0, year)

    # sorted() stays stable under reverse=True.
    return sorted(items, key=_key, reverse=True)


async def search_titles(
    query: str,
    *,
    client: TMDBSearchClient | None = None,
) -> list[SearchResultItem]:
    client = client or TMDBSearchClient.from_settings()
    payload = await client.search_multi(query)
    envelope = parse_search_envelope(payload)
    items = classify_search_results(envelope.results)
    return rank_search_results(items)


async def search_action(
    query: str,
    *,
    pipeline: SearchPipeline | None = None,
) -> SearchActionState:
    pipeline = pipeline or search_titles
    logger.info("Searching TMDB query=%r", query)
    try:
        items = await pipeline(query)
    except TMDBError as exc:
        logger.warning("TMDB search failed query=%r", query, exc_info=exc)
        return SearchFailure(message=GENERIC_SEARCH_ERROR)
    except Exception:
        logger.exception("Unexpected error during TMDB search query=%r", query)
        return SearchFailure(message=GENERIC_SEARCH_ERROR)

    logger.info("TMDB search found %s results query=%r", len(items), query)
    return SearchSuccess(items=items)
