from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional, List


class TimelineModel(BaseModel):
    """Base for dataset models: frozen, accepts camelCase keys from the JSON document"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Artist(TimelineModel):
    """Model for a single artist entry and their featured artwork"""
    name: str
    painting_title: str = Field(alias="paintingTitle")
    photo_wiki_title: Optional[str] = Field(default=None, alias="photoWikiTitle")
    painting_wiki_title: Optional[str] = Field(default=None, alias="paintingWikiTitle")


class CountryGroup(TimelineModel):
    """Artists of one movement grouped under a country"""
    country: str
    artists: List[Artist] = []


class ArtMovement(TimelineModel):
    """Model for an art movement within an era"""
    name: str
    countries: List[CountryGroup] = []


class TimelineItem(TimelineModel):
    """Model for one era of the timeline"""
    century: str
    period: str
    description: str
    art_movements: List[ArtMovement] = Field(default=[], alias="artMovements")


class ArtistSummary(BaseModel):
    """Artist entry in the aggregated per-country view"""
    name: str
    movement_names: List[str]


class CountrySummary(BaseModel):
    """Country entry in the aggregated per-era view"""
    country: str
    artists: List[ArtistSummary]


ThumbnailStatus = Literal["idle", "loading", "loaded", "error"]


class ThumbnailState(BaseModel):
    """State of a thumbnail lookup; src is only set when loaded"""
    model_config = ConfigDict(frozen=True)

    status: ThumbnailStatus
    src: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in ("loaded", "error")

    @classmethod
    def idle(cls) -> "ThumbnailState":
        return cls(status="idle")

    @classmethod
    def loading(cls) -> "ThumbnailState":
        return cls(status="loading")

    @classmethod
    def loaded(cls, src: str) -> "ThumbnailState":
        return cls(status="loaded", src=src)

    @classmethod
    def error(cls) -> "ThumbnailState":
        return cls(status="error")


class ThumbnailResponse(BaseModel):
    """Response model for a resolved thumbnail"""
    title: str
    status: ThumbnailStatus
    src: Optional[str] = None
    referrer_policy: str = "no-referrer"


class EraResponse(BaseModel):
    """Response model for one era with its aggregated country view"""
    index: int
    era: TimelineItem
    countries: Optional[List[CountrySummary]] = None
    artist_counts: List[List[int]] = []  # Per movement, artists per country group
