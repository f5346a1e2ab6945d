"""Geofence presence configuration."""

import os
from dataclasses import dataclass


@dataclass
class GeofenceConfig:
    radius_meters: float = 15.0
    # Two in-radius samples further apart than this do not count as continuous
    max_gap_seconds: float = 120.0
    required_presence_minutes: int = 20
    # Window of location history read when evaluating presence
    lookback_minutes: int = 30
    # Samples reported with a worse GPS accuracy are rejected
    min_accuracy_meters: float = 50.0

    @classmethod
    def from_env(cls) -> "GeofenceConfig":
        """Load config with environment variable overrides (GEOFENCE_ prefix)."""
        config = cls()

        if v := os.getenv("GEOFENCE_RADIUS_METERS"):
            config.radius_meters = float(v)
        if v := os.getenv("GEOFENCE_MAX_GAP_SECONDS"):
            config.max_gap_seconds = float(v)
        if v := os.getenv("GEOFENCE_REQUIRED_PRESENCE_MINUTES"):
            config.required_presence_minutes = int(v)
        if v := os.getenv("GEOFENCE_LOOKBACK_MINUTES"):
            config.lookback_minutes = int(v)
        if v := os.getenv("GEOFENCE_MIN_ACCURACY_METERS"):
            config.min_accuracy_meters = float(v)
        return config


default_config = GeofenceConfig()
