"""
Trip, stop and scheduled activity models.
"""
from sqlalchemy import Column, String, Date, Time, Boolean, Numeric, Text, Enum as SQLEnum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class ActivityStatus(str, enum.Enum):
    """Scheduled activity status enumeration."""
    PLANNED = "planned"
    BOOKED = "booked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Trip(BaseModel):
    """Trip model; the root of the ownership tree."""
    __tablename__ = "trips"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    cover_photo = Column(String(500), nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="trips")
    stops = relationship(
        "TripStop",
        back_populates="trip",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TripStop.order_index",
    )


class TripStop(BaseModel):
    """A city visit within a trip. order_index is dense and zero-based per trip."""
    __tablename__ = "trip_stops"

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    city_id = Column(Integer, ForeignKey("cities.id", ondelete="SET NULL"), nullable=True, index=True)
    city_name = Column(String(200), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="stops")
    city = relationship("City")
    activities = relationship(
        "TripActivity",
        back_populates="stop",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TripActivity(BaseModel):
    """Activity scheduled at a stop, optionally linked to a catalog activity."""
    __tablename__ = "trip_activities"

    trip_stop_id = Column(Integer, ForeignKey("trip_stops.id", ondelete="CASCADE"), nullable=False, index=True)
    activity_id = Column(Integer, ForeignKey("activities.id", ondelete="SET NULL"), nullable=True, index=True)
    activity_name = Column(String(200), nullable=False)
    scheduled_date = Column(Date, nullable=True, index=True)
    scheduled_time = Column(Time, nullable=True)
    custom_cost = Column(Numeric(10, 2), nullable=True)  # Overrides the catalog estimated_cost when set
    notes = Column(Text, nullable=True)
    status = Column(
        SQLEnum(ActivityStatus, values_callable=lambda e: [m.value for m in e]),
        default=ActivityStatus.PLANNED,
        nullable=False,
    )

    # Relationships
    stop = relationship("TripStop", back_populates="activities")
    catalog_activity = relationship("Activity")
