"""Plan limit enforcement: check the monthly analysis quota before running."""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PlanLimitError
from app.models.user import User
from app.services.analysis_store import check_subscription_limit


async def check_analysis_quota(db: AsyncSession, user: User) -> dict:
    """Raise PlanLimitError if the user has used up this month's analyses."""
    status = await check_subscription_limit(db, user.id, user.plan)
    if not status["can_analyze"]:
        raise PlanLimitError(
            f"Plan '{status['plan']}' allows {status['limit']} analyses per month. "
            f"Used: {status['usage']['total']}. Upgrade your plan to run more."
        )
    return status
