from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class SearchResultItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    title: str
    year: str
    poster_url: Optional[str] = None


class Rating(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    value: str


class MovieDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    title: str
    year: Optional[str] = None
    rated: Optional[str] = None
    runtime: Optional[str] = None
    genre: Optional[str] = None
    plot: Optional[str] = None
    director: Optional[str] = None
    ratings: List[Rating] = Field(default_factory=list)
    poster_url: Optional[str] = None


class ErrorResponse(BaseModel):
    code: int
    message: str
