"""Geofence classification and continuous presence detection.

A member's phone reports GPS samples while they are at the gym. Each sample is
classified against a circular geofence around the gym's coordinates, and the
time-ordered log is scanned for the longest stretch of in-radius samples whose
spacing never exceeds the gap tolerance.
"""

import math
from collections.abc import Sequence
from datetime import datetime

import structlog

from .config import GeofenceConfig, default_config
from .models import CheckInEligibility, GeoPoint, LocationSample, PresenceSummary

logger = structlog.get_logger()

EARTH_RADIUS_M = 6_371_000.0


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two lat/lon points."""
    lat1_r, lon1_r = math.radians(lat1), math.radians(lon1)
    lat2_r, lon2_r = math.radians(lat2), math.radians(lon2)
    dlat = lat2_r - lat1_r
    dlon = lon2_r - lon1_r
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


class GeofenceEvaluator:
    def __init__(self, config: GeofenceConfig | None = None) -> None:
        self._config = config or default_config

    @property
    def config(self) -> GeofenceConfig:
        return self._config

    def build_sample(
        self,
        latitude: float,
        longitude: float,
        center: GeoPoint,
        recorded_at: datetime,
        accuracy: float | None = None,
    ) -> LocationSample:
        """Classify one GPS reading against the geofence.

        Raises:
            ValueError: if the reported accuracy is worse than allowed.
        """
        if accuracy is not None and accuracy > self._config.min_accuracy_meters:
            raise ValueError(
                f"GPS accuracy {accuracy:.0f}m is worse than the "
                f"{self._config.min_accuracy_meters:.0f}m required"
            )

        distance = haversine_meters(latitude, longitude, center.latitude, center.longitude)
        return LocationSample(
            latitude=latitude,
            longitude=longitude,
            recorded_at=recorded_at,
            distance_from_center=distance,
            within_geofence=distance <= self._config.radius_meters,
        )

    def continuous_presence(self, samples: Sequence[LocationSample]) -> PresenceSummary:
        """Longest continuous in-radius stretch in the sample log.

        Consecutive in-radius samples no more than ``max_gap_seconds`` apart
        extend the running stretch by their spacing; a wider gap restarts it
        from zero. A sample outside the radius closes the stretch. The first
        sample of a stretch contributes nothing on its own.
        """
        ordered = sorted(samples, key=lambda s: s.recorded_at)
        max_gap = self._config.max_gap_seconds

        longest = 0.0
        current = 0.0
        last_in_radius: datetime | None = None

        for sample in ordered:
            if sample.within_geofence:
                if last_in_radius is not None:
                    gap = (sample.recorded_at - last_in_radius).total_seconds()
                    current = current + gap if gap <= max_gap else 0.0
                last_in_radius = sample.recorded_at
            else:
                longest = max(longest, current)
                current = 0.0
                last_in_radius = None

        longest = max(longest, current)
        minutes = int(longest // 60)

        return PresenceSummary(
            continuous_presence_minutes=minutes,
            has_minimum_presence=minutes >= self._config.required_presence_minutes,
            is_currently_within_geofence=ordered[-1].within_geofence if ordered else False,
            total_records=len(ordered),
        )

    def evaluate_check_in(
        self, distance_from_center: float, summary: PresenceSummary
    ) -> CheckInEligibility:
        cfg = self._config
        minutes = summary.continuous_presence_minutes

        reason = None
        if distance_from_center > cfg.radius_meters:
            reason = f"You must be within {cfg.radius_meters:.0f} meters of the gym to check in"
        elif not summary.has_minimum_presence:
            reason = (
                f"You need to stay within the gym area for at least "
                f"{cfg.required_presence_minutes} minutes. Current: {minutes} minutes"
            )

        if reason:
            logger.info(
                "check_in_rejected",
                distance_from_center=round(distance_from_center, 1),
                continuous_presence_minutes=minutes,
            )

        return CheckInEligibility(
            eligible=reason is None,
            distance_from_center=distance_from_center,
            continuous_presence_minutes=minutes,
            reason=reason,
        )
