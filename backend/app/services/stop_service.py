"""
Stop service: ordering of city stops within a trip.

For every trip the stops' order_index values form the contiguous sequence
0..N-1. Add, delete and reorder each run in one transaction while holding a
row lock on the parent trip (see ownership.check_trip_owner(lock=True)).
"""
import logging
from datetime import date
from typing import List, Optional
from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload
from app.core.config import settings
from app.models.city import City
from app.models.trip import Trip, TripStop, TripActivity
from app.schemas.trip import StopCreate, StopUpdate, StopResponse
from app.services.activity_service import sort_activities, build_trip_activity_response

logger = logging.getLogger(__name__)


class StopValidationError(ValueError):
    """Raised when a stop payload violates an itinerary rule."""


class DateRangeError(StopValidationError):
    """Raised when a stop's dates are inverted or fall outside the trip."""


class StopOrderError(StopValidationError):
    """Raised when a reorder payload is not a permutation of the trip's stops."""


def validate_stop_dates(trip: Trip, start_date: date, end_date: date) -> None:
    """Check a stop's date range against itself and, in strict mode, against the trip."""
    if end_date < start_date:
        raise DateRangeError("Stop end date must be on or after its start date")
    if settings.STRICT_STOP_DATES and (start_date < trip.start_date or end_date > trip.end_date):
        raise DateRangeError(
            f"Stop dates must fall within the trip dates ({trip.start_date} to {trip.end_date})"
        )


def validate_stop_covers_activities(stop: TripStop, start_date: date, end_date: date, db: Session) -> None:
    """A stop's date range may not shrink past its scheduled activities."""
    first_day, last_day = db.query(
        func.min(TripActivity.scheduled_date),
        func.max(TripActivity.scheduled_date)
    ).filter(TripActivity.trip_stop_id == stop.id).one()

    if first_day is None:
        return
    if first_day < start_date or last_day > end_date:
        raise DateRangeError(
            f"Stop dates must cover its scheduled activities ({first_day} to {last_day})"
        )


def list_stops(trip_id: int, db: Session) -> List[TripStop]:
    """Load a trip's stops, with city and activities, sorted by order_index."""
    return db.query(TripStop).options(
        joinedload(TripStop.city),
        selectinload(TripStop.activities).joinedload(TripActivity.catalog_activity),
    ).filter(
        TripStop.trip_id == trip_id
    ).order_by(TripStop.order_index, TripStop.id).all()


def build_stop_response(stop: TripStop) -> StopResponse:
    """Build a stop response with catalog city details and ordered activities."""
    city = stop.city
    return StopResponse(
        id=stop.id,
        trip_id=stop.trip_id,
        city_id=stop.city_id,
        city_name=stop.city_name,
        country=city.country if city else None,
        avg_daily_cost=city.avg_daily_cost if city else None,
        city_image=city.image_url if city else None,
        start_date=stop.start_date,
        end_date=stop.end_date,
        order_index=stop.order_index,
        notes=stop.notes,
        activities=[build_trip_activity_response(a) for a in sort_activities(stop.activities)],
        created_at=stop.created_at,
    )


def next_order_index(trip_id: int, db: Session) -> int:
    """max(order_index) + 1, or 0 for a trip without stops."""
    current_max = db.query(func.max(TripStop.order_index)).filter(
        TripStop.trip_id == trip_id
    ).scalar()
    return 0 if current_max is None else current_max + 1


def _get_city(city_id: Optional[int], db: Session) -> Optional[City]:
    if city_id is None:
        return None
    city = db.query(City).filter(City.id == city_id).first()
    if not city:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="City not found"
        )
    return city


def add_stop(trip: Trip, data: StopCreate, db: Session) -> TripStop:
    """Append a stop at the end of the trip's itinerary."""
    city = _get_city(data.city_id, db)
    city_name = data.city_name or (city.name if city else None)
    if not city_name:
        raise StopValidationError("Please provide city_name or city_id")

    validate_stop_dates(trip, data.start_date, data.end_date)

    stop = TripStop(
        trip_id=trip.id,
        city_id=city.id if city else None,
        city_name=city_name,
        start_date=data.start_date,
        end_date=data.end_date,
        order_index=next_order_index(trip.id, db),
        notes=data.notes,
    )
    db.add(stop)
    db.commit()
    db.refresh(stop)

    logger.info(f"Added stop {stop.id} to trip {trip.id} at index {stop.order_index}")
    return stop


def update_stop(trip: Trip, stop: TripStop, data: StopUpdate, db: Session) -> TripStop:
    """Apply a partial update to a stop. Never changes order_index."""
    changes = data.model_dump(exclude_unset=True)

    if "city_id" in changes:
        city = _get_city(changes.pop("city_id"), db)
        stop.city_id = city.id if city else None
        if city and not changes.get("city_name"):
            stop.city_name = city.name

    for field in ("city_name", "start_date", "end_date"):
        if changes.get(field) is None:
            changes.pop(field, None)

    new_start = changes.get("start_date", stop.start_date)
    new_end = changes.get("end_date", stop.end_date)
    if "start_date" in changes or "end_date" in changes:
        validate_stop_dates(trip, new_start, new_end)
        if settings.STRICT_STOP_DATES:
            validate_stop_covers_activities(stop, new_start, new_end, db)

    for field, value in changes.items():
        setattr(stop, field, value)

    db.commit()
    db.refresh(stop)
    return stop


def delete_stop(trip: Trip, stop: TripStop, db: Session) -> None:
    """Delete a stop (and its activities) and close the gap it leaves in the order."""
    stop_id = stop.id
    deleted_index = stop.order_index
    db.delete(stop)
    db.flush()

    db.query(TripStop).filter(
        TripStop.trip_id == trip.id,
        TripStop.order_index > deleted_index
    ).update(
        {TripStop.order_index: TripStop.order_index - 1},
        synchronize_session=False
    )
    db.commit()

    logger.info(f"Deleted stop {stop_id} from trip {trip.id}, shifted stops after index {deleted_index}")


def reorder_stops(trip: Trip, stop_ids: List[int], db: Session) -> List[TripStop]:
    """
    Replace the trip's order with stop_ids.
    stop_ids must contain every stop of the trip exactly once; otherwise
    nothing is changed and StopOrderError is raised.
    """
    stops = db.query(TripStop).filter(TripStop.trip_id == trip.id).all()
    stops_by_id = {stop.id: stop for stop in stops}

    if len(stop_ids) != len(set(stop_ids)):
        raise StopOrderError("stop_ids contains duplicate ids")

    unknown = [sid for sid in stop_ids if sid not in stops_by_id]
    if unknown:
        raise StopOrderError(f"Stops {unknown} do not belong to this trip")

    if len(stop_ids) != len(stops_by_id):
        missing = sorted(set(stops_by_id) - set(stop_ids))
        raise StopOrderError(f"stop_ids must list every stop of the trip; missing {missing}")

    for index, stop_id in enumerate(stop_ids):
        stops_by_id[stop_id].order_index = index

    db.commit()
    logger.info(f"Reordered {len(stop_ids)} stops of trip {trip.id}")

    # Drop cached collections so the reloaded stops reflect the new order
    db.expire_all()
    return list_stops(trip.id, db)
