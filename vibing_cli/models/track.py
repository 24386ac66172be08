"""
Pydantic models for catalog items as returned by the catalog service.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Vibe(BaseModel):
    """A facet tag such as ``seasonal/summer``."""

    model_config = ConfigDict(frozen=True)

    group_name: str
    name: str


class Track(BaseModel):
    """
    An immutable snapshot of one catalog entry.

    The service nulls out tag fields it could not read from the audio file, so
    text fields fall back to an empty string and ``duration`` to zero.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    # The service calls this field "path"; older payloads call it "url".
    url: str = Field(validation_alias=AliasChoices("url", "path"))
    title: str = ""
    author: str = ""
    image: str = ""
    genre: str = ""
    duration: int = Field(default=0, ge=0)
    vibes: tuple[Vibe, ...] = ()
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    download_count: int = Field(default=0, ge=0)

    @field_validator("title", "author", "image", "genre", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("duration", mode="before")
    @classmethod
    def null_duration(cls, v: Any) -> Any:
        return 0 if v is None else v

    @property
    def vibe_names(self) -> list[str]:
        """Tag names in server order."""
        return [vibe.name for vibe in self.vibes]
