"""
Stop routes, nested under a trip.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.utils import format_response
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import APIResponse
from app.schemas.trip import StopCreate, StopUpdate, StopReorder, StopResponse
from app.api.dependencies import get_current_user, get_current_user_optional
from app.services.ownership import check_trip_owner, check_trip_readable, check_stop_owner
from app.services import stop_service
from app.services.stop_service import StopValidationError

router = APIRouter(prefix="/trips/{trip_id}/stops", tags=["stops"])


def _bad_request(error: StopValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(error)
    )


@router.get("", response_model=APIResponse[List[StopResponse]])
async def get_stops(
    trip_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: Session = Depends(get_db)
):
    """Get a trip's stops in itinerary order, each with its activities."""
    check_trip_readable(trip_id, current_user, db)
    stops = stop_service.list_stops(trip_id, db)
    return format_response(data=[stop_service.build_stop_response(s) for s in stops])


@router.post("", response_model=APIResponse[StopResponse], status_code=status.HTTP_201_CREATED)
async def add_stop(
    trip_id: int,
    stop_data: StopCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Append a stop to the end of the itinerary."""
    trip = check_trip_owner(trip_id, current_user.id, db, lock=True)
    try:
        stop = stop_service.add_stop(trip, stop_data, db)
    except StopValidationError as e:
        raise _bad_request(e)
    return format_response(data=stop_service.build_stop_response(stop), message="Stop added successfully")


@router.put("/reorder", response_model=APIResponse[List[StopResponse]])
async def reorder_stops(
    trip_id: int,
    reorder: StopReorder,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Replace the itinerary order with the given complete list of stop ids."""
    trip = check_trip_owner(trip_id, current_user.id, db, lock=True)
    try:
        stops = stop_service.reorder_stops(trip, reorder.stop_ids, db)
    except StopValidationError as e:
        raise _bad_request(e)
    return format_response(
        data=[stop_service.build_stop_response(s) for s in stops],
        message="Stops reordered successfully"
    )


@router.put("/{stop_id}", response_model=APIResponse[StopResponse])
async def update_stop(
    trip_id: int,
    stop_id: int,
    stop_data: StopUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a stop's city, dates or notes."""
    stop = check_stop_owner(stop_id, current_user.id, db, trip_id=trip_id)
    try:
        stop = stop_service.update_stop(stop.trip, stop, stop_data, db)
    except StopValidationError as e:
        raise _bad_request(e)
    return format_response(data=stop_service.build_stop_response(stop), message="Stop updated successfully")


@router.delete("/{stop_id}", response_model=APIResponse[None])
async def delete_stop(
    trip_id: int,
    stop_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a stop and close the gap in the itinerary order."""
    trip = check_trip_owner(trip_id, current_user.id, db, lock=True)
    stop = check_stop_owner(stop_id, current_user.id, db, trip_id=trip.id)
    stop_service.delete_stop(trip, stop, db)
    return format_response(message="Stop deleted successfully")
