"""
Feed source and collection outcome models.

Hierarchy: SourceDescriptor → (fetch + parse) → FeedItem[] → CollectionOutcome

A CollectionOutcome is one source's terminal result for one cycle: either a
success carrying its items or a failure carrying the error string. Failures
never carry items.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import ConfigDict, Field, field_validator, model_validator

from .base import WireModel, utcnow


class SourceDescriptor(WireModel):
    """A configured feed: provider name and URL."""
    model_config = ConfigDict(frozen=True)

    name: str
    url: str

    @classmethod
    def from_mapping(cls, sources: Dict[str, str]) -> List["SourceDescriptor"]:
        return [cls(name=name, url=url) for name, url in sources.items()]


class FeedItem(WireModel):
    """One entry of a status feed."""
    title: str = ""
    description: str = ""
    link: str = ""
    published_at: datetime = Field(default_factory=utcnow)
    # Downstream item identity. Uniqueness is the feed's responsibility.
    guid: str = ""
    categories: List[str] = Field(default_factory=list)


class CollectionSuccess(WireModel):
    status: Literal["success"] = "success"
    name: str
    url: str
    items: List[FeedItem] = Field(default_factory=list)
    fetched_at: datetime = Field(default_factory=utcnow)
    item_count: int

    @model_validator(mode="before")
    @classmethod
    def _default_item_count(cls, data: Any) -> Any:
        if isinstance(data, dict) and "item_count" not in data and "itemCount" not in data:
            data = {**data, "item_count": len(data.get("items") or [])}
        return data

    @model_validator(mode="after")
    def _check_item_count(self) -> "CollectionSuccess":
        if self.item_count != len(self.items):
            raise ValueError(
                f"item_count={self.item_count} does not match {len(self.items)} items"
            )
        return self


class CollectionFailure(WireModel):
    status: Literal["failure"] = "failure"
    name: str
    url: str
    error: str
    fetched_at: datetime = Field(default_factory=utcnow)
    item_count: int = 0

    @field_validator("item_count")
    @classmethod
    def _no_items(cls, v: int) -> int:
        if v != 0:
            raise ValueError("a failed collection carries no items")
        return v


CollectionOutcome = Annotated[
    Union[CollectionSuccess, CollectionFailure],
    Field(discriminator="status"),
]


def total_item_count(outcomes: List[Union[CollectionSuccess, CollectionFailure]]) -> int:
    return sum(o.item_count for o in outcomes)
