"""
Trip service for trip-related business logic.
"""
import logging
import random
from datetime import date
from typing import List
from sqlalchemy import func, case
from sqlalchemy.orm import Session
from app.core.config import settings
from app.models.trip import Trip, TripStop, TripActivity, ActivityStatus
from app.models.user import User
from app.schemas.trip import (
    TripCreate, TripUpdate, TripResponse, TripSummaryResponse, TripStats, TripDetailResponse
)
from app.services.stop_service import list_stops, build_stop_response

logger = logging.getLogger(__name__)

# Assigned when a trip is created without a cover photo
DEFAULT_COVER_PHOTOS = [
    "https://images.unsplash.com/photo-1476514525535-07fb3b4ae5f1?w=2000&q=90",
    "https://images.unsplash.com/photo-1500530855697-b586d89ba3ee?w=2000&q=90",
    "https://images.unsplash.com/photo-1499092346589-b9b6be3e94b2?w=2000&q=90",
    "https://images.unsplash.com/photo-1502602898657-3e91760cbb34?w=2000&q=90",
    "https://images.unsplash.com/photo-1503899036084-c55cdd92da26?w=2000&q=90",
    "https://images.unsplash.com/photo-1523906834658-6e24ef2386f9?w=2000&q=90",
    "https://images.unsplash.com/photo-1533105079780-92b9be482077?w=2000&q=90",
    "https://images.unsplash.com/photo-1506929562872-bb421503ef21?w=2000&q=90",
]


class TripDateError(ValueError):
    """Raised when a trip ends before it starts."""


def validate_trip_dates(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise TripDateError("End date must be after start date")


def validate_trip_covers_stops(trip_id: int, start_date: date, end_date: date, db: Session) -> None:
    """A trip's date range may not shrink past the dates of its existing stops."""
    first_day, last_day = db.query(
        func.min(TripStop.start_date),
        func.max(TripStop.end_date)
    ).filter(TripStop.trip_id == trip_id).one()

    if first_day is None:
        return
    if first_day < start_date or last_day > end_date:
        raise TripDateError(
            f"Trip dates must cover all of its stops ({first_day} to {last_day})"
        )


def create_trip(owner: User, data: TripCreate, db: Session) -> Trip:
    """Create a private or public trip owned by owner."""
    validate_trip_dates(data.start_date, data.end_date)

    trip = Trip(
        user_id=owner.id,
        title=data.title,
        description=data.description,
        start_date=data.start_date,
        end_date=data.end_date,
        cover_photo=data.cover_photo or random.choice(DEFAULT_COVER_PHOTOS),
        is_public=data.is_public
    )
    db.add(trip)
    db.commit()
    db.refresh(trip)

    logger.info(f"User {owner.id} created trip {trip.id}")
    return trip


def update_trip(trip: Trip, data: TripUpdate, db: Session) -> Trip:
    """Apply a partial update; the resulting date range must stay valid."""
    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        # title, dates and visibility are required columns
        if value is not None or field in ("description", "cover_photo")
    }

    new_start = changes.get("start_date", trip.start_date)
    new_end = changes.get("end_date", trip.end_date)
    validate_trip_dates(new_start, new_end)
    if settings.STRICT_STOP_DATES and ("start_date" in changes or "end_date" in changes):
        validate_trip_covers_stops(trip.id, new_start, new_end, db)

    for field, value in changes.items():
        setattr(trip, field, value)

    db.commit()
    db.refresh(trip)
    return trip


def delete_trip(trip: Trip, db: Session) -> None:
    """Delete a trip together with its stops and activities."""
    trip_id = trip.id
    db.delete(trip)
    db.commit()
    logger.info(f"Deleted trip {trip_id}")


def list_user_trips(user_id: int, db: Session) -> List[TripSummaryResponse]:
    """All trips of a user, newest first, with stop counts and distinct city names."""
    trips = db.query(Trip).filter(
        Trip.user_id == user_id
    ).order_by(Trip.created_at.desc(), Trip.id.desc()).all()

    trip_ids = [t.id for t in trips]
    stops_by_trip = {}
    if trip_ids:
        rows = db.query(TripStop.trip_id, TripStop.city_name).filter(
            TripStop.trip_id.in_(trip_ids)
        ).order_by(TripStop.trip_id, TripStop.order_index).all()
        for trip_id, city_name in rows:
            stops_by_trip.setdefault(trip_id, []).append(city_name)

    summaries = []
    for trip in trips:
        city_names = stops_by_trip.get(trip.id, [])
        summaries.append(TripSummaryResponse(
            **TripResponse.model_validate(trip).model_dump(),
            stop_count=len(city_names),
            cities=list(dict.fromkeys(city_names))
        ))
    return summaries


def list_recent_trips(user_id: int, db: Session, limit: int = 4) -> List[TripSummaryResponse]:
    """Upcoming trips (starting today or later), soonest first."""
    today = date.today()
    trips = db.query(Trip).filter(
        Trip.user_id == user_id,
        Trip.start_date >= today
    ).order_by(Trip.start_date.asc(), Trip.id.asc()).limit(limit).all()

    summaries = []
    for trip in trips:
        stop_count = db.query(func.count(TripStop.id)).filter(TripStop.trip_id == trip.id).scalar() or 0
        summaries.append(TripSummaryResponse(
            **TripResponse.model_validate(trip).model_dump(),
            stop_count=stop_count
        ))
    return summaries


def get_trip_stats(user_id: int, db: Session) -> TripStats:
    """Count a user's trips by timing relative to today."""
    today = date.today()
    total, upcoming, ongoing, past = db.query(
        func.count(Trip.id),
        func.sum(case((Trip.start_date > today, 1), else_=0)),
        func.sum(case(((Trip.start_date <= today) & (Trip.end_date >= today), 1), else_=0)),
        func.sum(case((Trip.end_date < today, 1), else_=0)),
    ).filter(Trip.user_id == user_id).one()

    return TripStats(
        total_trips=int(total or 0),
        upcoming_trips=int(upcoming or 0),
        ongoing_trips=int(ongoing or 0),
        past_trips=int(past or 0)
    )


def build_trip_detail(trip: Trip, db: Session) -> TripDetailResponse:
    """Trip with owner name and stops (ordered by order_index) with nested activities."""
    stops = list_stops(trip.id, db)
    return TripDetailResponse(
        **TripResponse.model_validate(trip).model_dump(),
        owner_name=trip.owner.name,
        stops=[build_stop_response(stop) for stop in stops]
    )


def clone_trip(source: Trip, new_owner: User, db: Session) -> Trip:
    """
    Deep-copy a trip, its stops and their activities into a new private trip
    owned by new_owner. Dates and order_index are preserved, every row gets a
    new id, and activity statuses restart at planned. Runs in one transaction.
    """
    clone = Trip(
        user_id=new_owner.id,
        title=f"{source.title} (Copy)",
        description=source.description,
        start_date=source.start_date,
        end_date=source.end_date,
        cover_photo=source.cover_photo,
        is_public=False
    )
    db.add(clone)

    for stop in list_stops(source.id, db):
        stop_copy = TripStop(
            city_id=stop.city_id,
            city_name=stop.city_name,
            start_date=stop.start_date,
            end_date=stop.end_date,
            order_index=stop.order_index,
            notes=stop.notes
        )
        clone.stops.append(stop_copy)

        for trip_activity in stop.activities:
            stop_copy.activities.append(TripActivity(
                activity_id=trip_activity.activity_id,
                activity_name=trip_activity.activity_name,
                scheduled_date=trip_activity.scheduled_date,
                scheduled_time=trip_activity.scheduled_time,
                custom_cost=trip_activity.custom_cost,
                notes=trip_activity.notes,
                status=ActivityStatus.PLANNED
            ))

    db.commit()
    db.refresh(clone)

    logger.info(f"User {new_owner.id} cloned trip {source.id} into trip {clone.id}")
    return clone
