"""Pydantic models for the geofence presence domain."""

from datetime import datetime

from pydantic import BaseModel, Field


class GeoPoint(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class LocationSample(BaseModel):
    latitude: float
    longitude: float
    recorded_at: datetime
    distance_from_center: float = Field(ge=0)
    within_geofence: bool


class PresenceSummary(BaseModel):
    continuous_presence_minutes: int = Field(ge=0)
    has_minimum_presence: bool
    is_currently_within_geofence: bool
    total_records: int = Field(ge=0)


class CheckInEligibility(BaseModel):
    eligible: bool
    distance_from_center: float
    continuous_presence_minutes: int
    reason: str | None = None


# --- Request Models ---


class LocationSampleRequest(BaseModel):
    user_id: str
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    accuracy: float | None = Field(default=None, ge=0)
