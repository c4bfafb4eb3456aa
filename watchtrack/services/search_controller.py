from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from watchtrack.schemas.tmdb import SearchActionState, SearchResultItem, SearchSuccess
from watchtrack.services.search import GENERIC_SEARCH_ERROR, SearchPipeline, search_action

logger = logging.getLogger(__name__)


class SearchPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class SearchDisplay(str, Enum):
    NOTHING = "nothing"
    LOADING = "loading"
    RESULTS = "results"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class SearchView:
    phase: SearchPhase
    has_searched: bool
    items: tuple[SearchResultItem, ...] = ()
    message: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.phase is SearchPhase.LOADING

    @property
    def display(self) -> SearchDisplay:
        if self.phase is SearchPhase.LOADING:
            return SearchDisplay.LOADING
        if self.phase is SearchPhase.ERROR:
            return SearchDisplay.ERROR
        if self.phase is SearchPhase.SUCCESS:
            return SearchDisplay.RESULTS if self.items else SearchDisplay.EMPTY
        return SearchDisplay.NOTHING


class SearchController:
    """Owns the search state shown to the user.

    Only the latest submission may update state: each submit takes a new
    generation number and its outcome is dropped if another submit started
    while it was waiting on the pipeline.
    """

    def __init__(self, pipeline: SearchPipeline | None = None) -> None:
        self._pipeline = pipeline
        self._generation = 0
        self._view = SearchView(phase=SearchPhase.IDLE, has_searched=False)

    def view(self) -> SearchView:
        return self._view

    @property
    def generation(self) -> int:
        return self._generation

    async def submit(self, query: str | None) -> SearchActionState | None:
        cleaned = (query or "").strip()
        if not cleaned:
            return None

        self._generation += 1
        generation = self._generation
        self._view = SearchView(phase=SearchPhase.LOADING, has_searched=True)

        try:
            outcome = await search_action(cleaned, pipeline=self._pipeline)
        except BaseException:
            # Cancelled or interrupted mid-flight: never leave the view loading.
            if generation == self._generation:
                self._view = SearchView(
                    phase=SearchPhase.ERROR,
                    has_searched=True,
                    message=GENERIC_SEARCH_ERROR,
                )
            raise

        if generation != self._generation:
            logger.debug(
                "Discarding stale search result generation=%s current=%s",
                generation,
                self._generation,
            )
            return outcome

        if isinstance(outcome, SearchSuccess):
            self._view = SearchView(
                phase=SearchPhase.SUCCESS,
                has_searched=True,
                items=tuple(outcome.items),
            )
        else:
            self._view = SearchView(
                phase=SearchPhase.ERROR,
                has_searched=True,
                message=outcome.message,
            )
        return outcome
