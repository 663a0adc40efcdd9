"""Normalized schedule types produced by the engine. Wire types live in services.providers.types."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class OpenStatus(str, Enum):
    """The four states a location can be in at one instant."""

    OPEN = "open"
    CLOSED = "closed"
    OPENING_SOON = "openingSoon"
    CLOSING_SOON = "closingSoon"

    @property
    def is_open(self) -> bool:
        """True while the location is serving (closing soon still counts)."""
        return self in (OpenStatus.OPEN, OpenStatus.CLOSING_SOON)


class ChefStatus(str, Enum):
    """The five states a visiting chef appearance can be in."""

    HERE_NOW = "hereNow"
    GONE = "gone"
    ARRIVING_LATER = "arrivingLater"
    ARRIVING_SOON = "arrivingSoon"
    LEAVING_SOON = "leavingSoon"


@dataclass(frozen=True, order=True)
class NormalizedInterval:
    """One open period, anchored to a reference date. close > open after repair."""

    open: datetime
    close: datetime

    def to_dict(self) -> dict[str, str]:
        return {"open": self.open.isoformat(), "close": self.close.isoformat()}


@dataclass(frozen=True)
class ChefAppearance:
    name: str
    description: str
    open: datetime
    close: datetime
    status: ChefStatus

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "open": self.open.isoformat(),
            "close": self.close.isoformat(),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class DailySpecial:
    name: str
    type: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "type": self.type}


@dataclass(frozen=True)
class MenuItem:
    """One meal-planner recipe, ready for display. calories is None when upstream sent no usable number."""

    id: int
    name: str
    exact_name: str
    category: str
    allergens: tuple[str, ...]
    calories: int | None
    dietary_markers: tuple[str, ...]
    ingredients: str
    price: float
    serving_size: float
    serving_size_unit: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "exact_name": self.exact_name,
            "category": self.category,
            "allergens": list(self.allergens),
            "calories": self.calories,
            "dietary_markers": list(self.dietary_markers),
            "ingredients": self.ingredients,
            "price": self.price,
            "serving_size": self.serving_size,
            "serving_size_unit": self.serving_size_unit,
        }


@dataclass
class LocationSchedule:
    """
    One location on one date after normalization.

    Only `status` is ever reassigned after construction (by recompute_statuses);
    intervals/chefs/specials are tuples so snapshots can share them safely.
    status is None until the first classification.
    """

    id: int
    name: str
    summary: str
    description: str
    maps_url: str
    intervals: tuple[NormalizedInterval, ...] = ()
    status: OpenStatus | None = None
    chefs: tuple[ChefAppearance, ...] | None = None
    specials: tuple[DailySpecial, ...] | None = None
    mdo_id: int | None = None
    date: str = ""

    @property
    def is_closed_all_day(self) -> bool:
        return not self.intervals

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "summary": self.summary,
            "description": self.description,
            "maps_url": self.maps_url,
            "mdo_id": self.mdo_id,
            "date": self.date,
            "status": self.status.value if self.status is not None else None,
            "intervals": [i.to_dict() for i in self.intervals],
            "chefs": [c.to_dict() for c in self.chefs] if self.chefs is not None else None,
            "specials": [s.to_dict() for s in self.specials] if self.specials is not None else None,
        }
