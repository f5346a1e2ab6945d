"""Geofence location tracking and presence endpoints."""

from datetime import UTC, datetime, timedelta

import structlog
from fastapi import APIRouter, Depends, Query

from src.api.dependencies import geofence_config, get_location_log
from src.domains.presence.geofence import GeofenceEvaluator, haversine_meters
from src.domains.presence.models import LocationSampleRequest
from src.domains.presence.repository import SqlLocationLog

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/presence", tags=["presence"])

_evaluator = GeofenceEvaluator(geofence_config)


@router.post("/{gym_id}/samples")
async def record_sample(
    gym_id: str,
    request: LocationSampleRequest,
    log: SqlLocationLog = Depends(get_location_log),  # noqa: B008
) -> dict:
    """Classify one GPS reading against the gym's geofence and store it."""
    center = await log.get_gym_center(gym_id)
    sample = _evaluator.build_sample(
        request.latitude,
        request.longitude,
        center,
        recorded_at=datetime.now(UTC),
        accuracy=request.accuracy,
    )
    await log.insert_sample(gym_id, request.user_id, sample)

    logger.info(
        "location_sample_recorded",
        gym_id=gym_id,
        user_id=request.user_id,
        within_geofence=sample.within_geofence,
    )
    return {
        "success": True,
        "distance_from_gym": sample.distance_from_center,
        "is_within_geofence": sample.within_geofence,
        "recorded_at": sample.recorded_at.isoformat(),
    }


async def _recent_summary(log: SqlLocationLog, gym_id: str, user_id: str):
    since = datetime.now(UTC) - timedelta(minutes=_evaluator.config.lookback_minutes)
    samples = await log.list_samples_since(gym_id, user_id, since)
    return _evaluator.continuous_presence(samples)


@router.get("/{gym_id}/users/{user_id}")
async def get_presence(
    gym_id: str,
    user_id: str,
    log: SqlLocationLog = Depends(get_location_log),  # noqa: B008
) -> dict:
    """Continuous presence over the lookback window."""
    summary = await _recent_summary(log, gym_id, user_id)
    return {"success": True, **summary.model_dump()}


@router.get("/{gym_id}/users/{user_id}/eligibility")
async def get_check_in_eligibility(
    gym_id: str,
    user_id: str,
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
    log: SqlLocationLog = Depends(get_location_log),  # noqa: B008
) -> dict:
    center = await log.get_gym_center(gym_id)
    distance = haversine_meters(latitude, longitude, center.latitude, center.longitude)
    summary = await _recent_summary(log, gym_id, user_id)
    return _evaluator.evaluate_check_in(distance, summary).model_dump()
