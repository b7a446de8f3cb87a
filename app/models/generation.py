"""Domain records that the template engine turns into page descriptors."""

from typing import Literal, Optional

from pydantic import BaseModel


class DistanceSpec(BaseModel):
    name: str
    slug: str
    km: float
    display_distance: str


class RaceData(BaseModel):
    name: str
    slug: str
    city: Optional[str] = None
    country: Optional[str] = None
    race_date: Optional[str] = None
    distance: Literal["marathon", "half", "10k", "5k"] = "marathon"
    preview_route_key: Optional[str] = None


class TimeGoal(BaseModel):
    distance: Literal["5k", "10k", "half-marathon", "marathon"]
    distance_label: str
    distance_km: float
    target_time: str  # "H:MM" or "MM:SS"
    pace_per_km: str
    pace_per_mile: str
    difficulty: Literal["beginner", "intermediate", "advanced", "elite"]
