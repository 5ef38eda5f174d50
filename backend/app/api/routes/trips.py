"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.utils import format_response
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import APIResponse
from app.schemas.trip import (
    TripCreate, TripUpdate, TripResponse, TripSummaryResponse, TripStats, TripDetailResponse
)
from app.api.dependencies import get_current_user, get_current_user_optional
from app.services.ownership import check_trip_owner, check_trip_readable, get_trip_or_404, can_view_trip
from app.services import trip_service
from app.services.trip_service import TripDateError

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post("", response_model=APIResponse[TripResponse], status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new trip."""
    try:
        trip = trip_service.create_trip(current_user, trip_data, db)
    except TripDateError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return format_response(data=TripResponse.model_validate(trip), message="Trip created successfully")


@router.get("", response_model=APIResponse[List[TripSummaryResponse]])
async def list_trips(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List all trips of the current user, newest first."""
    return format_response(data=trip_service.list_user_trips(current_user.id, db))


@router.get("/recent", response_model=APIResponse[List[TripSummaryResponse]])
async def list_recent_trips(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Upcoming trips for the dashboard."""
    return format_response(data=trip_service.list_recent_trips(current_user.id, db))


@router.get("/stats", response_model=APIResponse[TripStats])
async def get_trip_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Trip counters for the dashboard."""
    return format_response(data=trip_service.get_trip_stats(current_user.id, db))


@router.get("/{trip_id}", response_model=APIResponse[TripDetailResponse])
async def get_trip(
    trip_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: Session = Depends(get_db)
):
    """Get trip details with stops and activities. Public trips need no token."""
    trip = check_trip_readable(trip_id, current_user, db)
    return format_response(data=trip_service.build_trip_detail(trip, db))


@router.put("/{trip_id}", response_model=APIResponse[TripResponse])
async def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a trip."""
    trip = check_trip_owner(trip_id, current_user.id, db, lock=True)
    try:
        trip = trip_service.update_trip(trip, trip_data, db)
    except TripDateError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return format_response(data=TripResponse.model_validate(trip), message="Trip updated successfully")


@router.delete("/{trip_id}", response_model=APIResponse[None])
async def delete_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a trip with all its stops and activities."""
    trip = check_trip_owner(trip_id, current_user.id, db)
    trip_service.delete_trip(trip, db)
    return format_response(message="Trip deleted successfully")


@router.post("/{trip_id}/clone", response_model=APIResponse[TripResponse], status_code=status.HTTP_201_CREATED)
async def clone_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Copy a public (or own) trip into the current user's account."""
    source = get_trip_or_404(trip_id, db)
    if not can_view_trip(source, current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot clone private trip"
        )

    clone = trip_service.clone_trip(source, current_user, db)
    return format_response(data=TripResponse.model_validate(clone), message="Trip cloned successfully")
