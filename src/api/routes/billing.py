"""Gym subscription billing and wallet endpoints."""

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException

from src.api.dependencies import get_billing_service
from src.config import settings
from src.domains.billing.models import BillingCycleRequest, RechargeRequest
from src.domains.billing.service import BillingService

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/billing", tags=["billing"])


@router.get("/{gym_id}/snapshot")
async def get_snapshot(
    gym_id: str,
    service: BillingService = Depends(get_billing_service),  # noqa: B008
) -> dict:
    """Current free/paid split, wallet balance and next monthly charge."""
    snapshot = await service.compute_snapshot(gym_id)
    return snapshot.model_dump(mode="json")


@router.post("/{gym_id}/process")
async def process_billing(
    gym_id: str,
    service: BillingService = Depends(get_billing_service),  # noqa: B008
) -> dict:
    outcome = await service.process_monthly_billing(gym_id)
    return outcome.to_response()


@router.post("/{gym_id}/recharge")
async def recharge_wallet(
    gym_id: str,
    request: RechargeRequest,
    service: BillingService = Depends(get_billing_service),  # noqa: B008
) -> dict:
    outcome = await service.recharge_wallet(gym_id, request.amount, request.payment_reference)
    return outcome.to_response()


@router.get("/{gym_id}/members")
async def list_members(
    gym_id: str,
    service: BillingService = Depends(get_billing_service),  # noqa: B008
) -> dict:
    members = await service.list_members(gym_id)
    return {
        "gym_id": gym_id,
        "members": [m.model_dump(mode="json") for m in members],
        "total": len(members),
    }


@router.get("/{gym_id}/access/{user_id}")
async def check_member_access(
    gym_id: str,
    user_id: str,
    service: BillingService = Depends(get_billing_service),  # noqa: B008
) -> dict:
    result = await service.check_member_access(gym_id, user_id)
    return result.model_dump(mode="json")


@router.post("/cycle")
async def run_billing_cycle(
    request: BillingCycleRequest | None = None,
    x_cron_secret: str | None = Header(default=None),
    service: BillingService = Depends(get_billing_service),  # noqa: B008
) -> dict:
    """Daily billing sweep; bills every active gym on the billing day.

    Passing a gym_id bills that gym immediately, whatever the date.
    """
    if settings.billing_cron_secret and x_cron_secret != settings.billing_cron_secret:
        logger.warning("billing_cycle_unauthorized")
        raise HTTPException(status_code=401, detail="Invalid cron secret")

    if request and request.gym_id:
        outcomes = [await service.process_monthly_billing(request.gym_id)]
    else:
        outcomes = await service.run_billing_cycle()

    return {
        "success": True,
        "processed": len(outcomes),
        "results": [o.to_response() for o in outcomes],
    }
