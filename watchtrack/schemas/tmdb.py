from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter, field_validator


class _TMDBWireModel(BaseModel):
    # Upstream payloads carry many more fields than we use; ignore them, but
    # do not coerce the ones we do read.
    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)


class MovieResult(_TMDBWireModel):
    media_type: Literal["movie"]
    id: int
    title: str
    poster_path: str | None = None
    release_date: str = ""
    overview: str

    @field_validator("release_date", mode="before")
    @classmethod
    def null_release_date_is_empty(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def display_title(self) -> str:
        return self.title

    @property
    def date_string(self) -> str:
        return self.release_date


class TvResult(_TMDBWireModel):
    media_type: Literal["tv"]
    id: int
    name: str
    poster_path: str | None = None
    first_air_date: str = ""
    overview: str

    @field_validator("first_air_date", mode="before")
    @classmethod
    def null_first_air_date_is_empty(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def display_title(self) -> str:
        return self.name

    @property
    def date_string(self) -> str:
        return self.first_air_date


class PersonResult(_TMDBWireModel):
    media_type: Literal["person"]
    id: int
    name: str
    profile_path: str | None = None
    known_for_department: str | None = None


# Every kind /search/multi can return. Only movie and tv survive classification.
TMDBMultiSearchItem = Annotated[
    MovieResult | TvResult | PersonResult,
    Field(discriminator="media_type"),
]
multi_search_item_adapter: TypeAdapter[MovieResult | TvResult | PersonResult] = TypeAdapter(
    TMDBMultiSearchItem
)

SearchResultItem = MovieResult | TvResult


class SearchEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    page: StrictInt
    results: list[Any]
    total_pages: StrictInt
    total_results: StrictInt

    @field_validator("page", "total_pages", "total_results", mode="before")
    @classmethod
    def integral_float_is_int(cls, value: object) -> object:
        # JSON numbers like 1.0 are still counts; strings and bools are not.
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


class SearchSuccess(BaseModel):
    status: Literal["success"] = "success"
    items: list[Annotated[SearchResultItem, Field(discriminator="media_type")]] = Field(
        default_factory=list
    )


class SearchFailure(BaseModel):
    status: Literal["error"] = "error"
    message: str


SearchActionState = Annotated[SearchSuccess | SearchFailure, Field(discriminator="status")]


class SearchResultCardOut(BaseModel):
    key: str
    tmdb_id: int
    media_type: str = Field(pattern="^(movie|tv)$")
    title: str
    year: int | None = None
    year_label: str
    type_label: str
    overview: str
    poster_path: str | None = None
    poster_url: str | None = None


class SearchSuccessOut(BaseModel):
    status: Literal["success"] = "success"
    items: list[SearchResultCardOut]


class SearchFailureOut(BaseModel):
    status: Literal["error"] = "error"
    message: str


class TitleAction(str, Enum):
    WATCHED = "watched"
    WATCHLIST = "watchlist"
    ADD_TO_LIST = "add_to_list"
    RATE_UP = "rate_up"
    RATE_DOWN = "rate_down"


class TitleActionOut(BaseModel):
    action: TitleAction
    media_type: str = Field(pattern="^(movie|tv)$")
    tmdb_id: int
    persisted: bool = False
