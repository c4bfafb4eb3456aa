from __future__ import annotations

from watchtrack.schemas.tmdb import (
    MovieResult,
    SearchResultCardOut,
    SearchResultItem,
)
from watchtrack.services.search import effective_year
from watchtrack.services.tmdb import tmdb_image_url

CARD_POSTER_SIZE = "w342"


def build_result_card(item: SearchResultItem, *, poster_size: str = CARD_POSTER_SIZE) -> SearchResultCardOut:
    year = effective_year(item) or None
    return SearchResultCardOut(
        key=f"{item.media_type}-{item.id}",
        tmdb_id=item.id,
        media_type=item.media_type,
        title=item.display_title,
        year=year,
        year_label=str(year) if year is not None else "N/A",
        type_label="Movie" if isinstance(item, MovieResult) else "TV Show",
        overview=item.overview,
        poster_path=item.poster_path,
        poster_url=tmdb_image_url(item.poster_path, poster_size),
    )


def build_result_cards(items: list[SearchResultItem]) -> list[SearchResultCardOut]:
    return [build_result_card(item) for item in items]
