"""
Activity routes: catalog search and activities scheduled at stops.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional
from decimal import Decimal
from app.core.utils import format_response
from app.db.session import get_db
from app.models.user import User
from app.models.city import Activity
from app.schemas.common import APIResponse
from app.schemas.city import ActivityResponse
from app.schemas.trip import TripActivityCreate, TripActivityUpdate, TripActivityResponse
from app.api.dependencies import get_current_user
from app.services.ownership import check_stop_owner, check_trip_activity_owner
from app.services import activity_service

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("", response_model=APIResponse[List[ActivityResponse]])
async def search_activities(
    city_id: Optional[int] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    min_cost: Optional[Decimal] = Query(None, ge=0),
    max_cost: Optional[Decimal] = Query(None, ge=0),
    db: Session = Depends(get_db)
):
    """Search the activity catalog."""
    query = db.query(Activity)

    if city_id is not None:
        query = query.filter(Activity.city_id == city_id)
    if category:
        query = query.filter(Activity.category == category)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Activity.name.ilike(pattern), Activity.description.ilike(pattern)))
    if min_cost is not None:
        query = query.filter(Activity.estimated_cost >= min_cost)
    if max_cost is not None:
        query = query.filter(Activity.estimated_cost <= max_cost)

    activities = query.order_by(Activity.category, Activity.name).all()
    return format_response(data=[ActivityResponse.model_validate(a) for a in activities])


@router.get("/categories", response_model=APIResponse[List[str]])
async def get_categories(db: Session = Depends(get_db)):
    """Distinct catalog categories."""
    rows = db.query(Activity.category).distinct().order_by(Activity.category).all()
    return format_response(data=[row[0] for row in rows])


@router.post("/stops/{stop_id}", response_model=APIResponse[TripActivityResponse], status_code=status.HTTP_201_CREATED)
async def add_activity_to_stop(
    stop_id: int,
    activity_data: TripActivityCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Schedule an activity at one of the current user's stops."""
    stop = check_stop_owner(stop_id, current_user.id, db)
    trip_activity = activity_service.add_activity_to_stop(stop, activity_data, db)
    return format_response(
        data=activity_service.build_trip_activity_response(trip_activity),
        message="Activity added to stop"
    )


@router.put("/trip-activities/{trip_activity_id}", response_model=APIResponse[TripActivityResponse])
async def update_trip_activity(
    trip_activity_id: int,
    activity_data: TripActivityUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a scheduled activity."""
    trip_activity = check_trip_activity_owner(trip_activity_id, current_user.id, db)
    trip_activity = activity_service.update_trip_activity(trip_activity, activity_data, db)
    return format_response(
        data=activity_service.build_trip_activity_response(trip_activity),
        message="Activity updated"
    )


@router.delete("/trip-activities/{trip_activity_id}", response_model=APIResponse[None])
async def remove_trip_activity(
    trip_activity_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a scheduled activity."""
    trip_activity = check_trip_activity_owner(trip_activity_id, current_user.id, db)
    activity_service.remove_trip_activity(trip_activity, db)
    return format_response(message="Activity removed")
