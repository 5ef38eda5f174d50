"""
Authorization checks for the trip ownership tree.

Every stop or activity mutation resolves its parent trip and compares
trips.user_id with the caller before touching any row.
"""
import logging
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from app.models.trip import Trip, TripStop, TripActivity
from app.models.user import User

logger = logging.getLogger(__name__)


def get_trip_or_404(trip_id: int, db: Session, lock: bool = False) -> Trip:
    """Load a trip, optionally taking a row lock that serializes writers on the same trip."""
    query = db.query(Trip).filter(Trip.id == trip_id)
    if lock:
        query = query.with_for_update()
    trip = query.first()
    if not trip:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trip not found"
        )
    return trip


def check_trip_owner(trip_id: int, user_id: int, db: Session, lock: bool = False) -> Trip:
    """Return the trip if user_id owns it, else raise 404/403."""
    trip = get_trip_or_404(trip_id, db, lock=lock)
    if trip.user_id != user_id:
        logger.warning(f"User {user_id} denied write access to trip {trip_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized"
        )
    return trip


def can_view_trip(trip: Trip, user: Optional[User]) -> bool:
    """Public trips are world-readable; private ones only by their owner."""
    return trip.is_public or (user is not None and user.id == trip.user_id)


def check_trip_readable(trip_id: int, user: Optional[User], db: Session) -> Trip:
    """Return the trip if the (possibly anonymous) caller may read it, else raise 404/403."""
    trip = get_trip_or_404(trip_id, db)
    if not can_view_trip(trip, user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
    return trip


def check_stop_owner(stop_id: int, user_id: int, db: Session, trip_id: Optional[int] = None) -> TripStop:
    """Resolve stop -> trip and verify ownership. trip_id, when given, must be the stop's trip."""
    query = db.query(TripStop).filter(TripStop.id == stop_id)
    if trip_id is not None:
        query = query.filter(TripStop.trip_id == trip_id)
    stop = query.first()
    if not stop:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stop not found"
        )
    if stop.trip.user_id != user_id:
        logger.warning(f"User {user_id} denied write access to stop {stop_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized"
        )
    return stop


def check_trip_activity_owner(trip_activity_id: int, user_id: int, db: Session) -> TripActivity:
    """Resolve activity -> stop -> trip and verify ownership."""
    row = db.query(TripActivity, Trip.user_id).join(
        TripStop, TripActivity.trip_stop_id == TripStop.id
    ).join(
        Trip, TripStop.trip_id == Trip.id
    ).filter(
        TripActivity.id == trip_activity_id
    ).first()

    if not row:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Activity not found"
        )

    trip_activity, owner_id = row
    if owner_id != user_id:
        logger.warning(f"User {user_id} denied write access to activity {trip_activity_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized"
        )
    return trip_activity
