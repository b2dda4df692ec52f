from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user
from app.db.postgres import get_db
from app.models.user import User
from app.schemas.usage import UsageResponse
from app.services.analysis_store import check_subscription_limit

router = APIRouter(prefix="/usage", tags=["usage"])


@router.get("", response_model=UsageResponse)
async def monthly_usage(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Analyses run this calendar month (UTC) against the plan quota."""
    return await check_subscription_limit(db, user.id, user.plan)
