from __future__ import annotations

from watchtrack.services.search_controller import SearchController


async def get_search_controller() -> SearchController:
    # One controller per request; HTTP callers hold no state between searches.
    return SearchController()
