"""
Activity service for scheduled activities attached to stops.
"""
import logging
from datetime import date, time
from decimal import Decimal
from typing import Iterable, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from app.core.config import settings
from app.models.city import Activity
from app.models.trip import TripStop, TripActivity, ActivityStatus
from app.schemas.trip import TripActivityCreate, TripActivityUpdate, TripActivityResponse

logger = logging.getLogger(__name__)


def resolve_activity_cost(trip_activity: TripActivity) -> Decimal:
    """
    Resolve the cost of a scheduled activity.
    Order: explicit custom_cost, then the linked catalog activity's estimated_cost, then 0.
    """
    if trip_activity.custom_cost is not None:
        return Decimal(trip_activity.custom_cost)
    catalog = trip_activity.catalog_activity
    if catalog is not None and catalog.estimated_cost is not None:
        return Decimal(catalog.estimated_cost)
    return Decimal(0)


def activity_category(trip_activity: TripActivity) -> str:
    """Catalog category of a scheduled activity, "other" when unlinked."""
    catalog = trip_activity.catalog_activity
    if catalog is not None and catalog.category:
        return catalog.category
    return "other"


def sort_activities(activities: Iterable[TripActivity]) -> List[TripActivity]:
    """Order by scheduled date, then time; unscheduled items go last, ties by id."""
    return sorted(
        activities,
        key=lambda a: (
            a.scheduled_date is None,
            a.scheduled_date or date.min,
            a.scheduled_time is None,
            a.scheduled_time or time.min,
            a.id or 0,
        ),
    )


def build_trip_activity_response(trip_activity: TripActivity) -> TripActivityResponse:
    """Build the response for a scheduled activity, including its resolved cost."""
    catalog = trip_activity.catalog_activity
    return TripActivityResponse(
        id=trip_activity.id,
        trip_stop_id=trip_activity.trip_stop_id,
        activity_id=trip_activity.activity_id,
        activity_name=trip_activity.activity_name,
        scheduled_date=trip_activity.scheduled_date,
        scheduled_time=trip_activity.scheduled_time,
        custom_cost=trip_activity.custom_cost,
        resolved_cost=resolve_activity_cost(trip_activity),
        category=catalog.category if catalog is not None else None,
        notes=trip_activity.notes,
        status=trip_activity.status,
        created_at=trip_activity.created_at,
    )


def _get_catalog_activity(activity_id: Optional[int], db: Session) -> Optional[Activity]:
    if activity_id is None:
        return None
    catalog = db.query(Activity).filter(Activity.id == activity_id).first()
    if not catalog:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Catalog activity not found"
        )
    return catalog


def validate_scheduled_date(stop: TripStop, scheduled_date: Optional[date]) -> None:
    """In strict mode a scheduled activity must fall on one of its stop's days."""
    if scheduled_date is None or not settings.STRICT_STOP_DATES:
        return
    if scheduled_date < stop.start_date or scheduled_date > stop.end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Activity date must fall within the stop dates ({stop.start_date} to {stop.end_date})"
        )


def add_activity_to_stop(stop: TripStop, data: TripActivityCreate, db: Session) -> TripActivity:
    """Schedule an activity at a stop. The caller has already verified ownership."""
    validate_scheduled_date(stop, data.scheduled_date)
    catalog = _get_catalog_activity(data.activity_id, db)

    activity_name = data.activity_name or (catalog.name if catalog else None)
    if not activity_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide activity_name or activity_id"
        )

    trip_activity = TripActivity(
        trip_stop_id=stop.id,
        activity_id=catalog.id if catalog else None,
        activity_name=activity_name,
        scheduled_date=data.scheduled_date,
        scheduled_time=data.scheduled_time,
        custom_cost=data.custom_cost,
        notes=data.notes,
        status=ActivityStatus.PLANNED,
    )
    db.add(trip_activity)
    db.commit()
    db.refresh(trip_activity)

    logger.info(f"Added activity {trip_activity.id} to stop {stop.id}")
    return trip_activity


def update_trip_activity(trip_activity: TripActivity, data: TripActivityUpdate, db: Session) -> TripActivity:
    """Apply a partial update to a scheduled activity."""
    changes = data.model_dump(exclude_unset=True)
    if changes.get("scheduled_date") is not None:
        validate_scheduled_date(trip_activity.stop, changes["scheduled_date"])

    for field, value in changes.items():
        if value is None and field in ("activity_name", "status"):
            # Required columns keep their current value
            continue
        setattr(trip_activity, field, value)

    db.commit()
    db.refresh(trip_activity)
    return trip_activity


def remove_trip_activity(trip_activity: TripActivity, db: Session) -> None:
    """Delete a scheduled activity."""
    trip_activity_id = trip_activity.id
    db.delete(trip_activity)
    db.commit()
    logger.info(f"Removed activity {trip_activity_id}")
