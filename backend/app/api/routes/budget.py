"""
Budget report routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from app.core.utils import format_response
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import APIResponse
from app.schemas.budget import TripBudget
from app.api.dependencies import get_current_user_optional
from app.services.ownership import check_trip_readable
from app.services.budget_service import get_trip_budget

router = APIRouter(prefix="/budget", tags=["budget"])


@router.get("/trips/{trip_id}", response_model=APIResponse[TripBudget])
async def get_budget(
    trip_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: Session = Depends(get_db)
):
    """
    Get the cost breakdown for a trip: activities by category, estimated
    spend per stop, accommodation and transport estimates, and a daily series.
    Public trips are readable without a token.
    """
    trip = check_trip_readable(trip_id, current_user, db)
    return format_response(data=get_trip_budget(trip, db))
