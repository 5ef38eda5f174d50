"""
Pydantic schemas for Trip, TripStop and TripActivity entities.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date, datetime, time as dt_time
from decimal import Decimal
from app.models.trip import ActivityStatus


class TripBase(BaseModel):
    """Base trip schema."""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: date
    end_date: date
    cover_photo: Optional[str] = None
    is_public: bool = False


class TripCreate(TripBase):
    """Schema for trip creation."""
    pass


class TripUpdate(BaseModel):
    """Schema for trip update."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    cover_photo: Optional[str] = None
    is_public: Optional[bool] = None


class TripResponse(TripBase):
    """Schema for trip response."""
    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripSummaryResponse(TripResponse):
    """Trip list item with stop count and visited cities."""
    stop_count: int = 0
    cities: List[str] = []


class TripStats(BaseModel):
    """Schema for the dashboard trip counters."""
    total_trips: int
    upcoming_trips: int
    ongoing_trips: int
    past_trips: int


class TripActivityCreate(BaseModel):
    """Schema for scheduling an activity at a stop."""
    activity_id: Optional[int] = None
    activity_name: Optional[str] = Field(None, max_length=200)
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[dt_time] = None
    custom_cost: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class TripActivityUpdate(BaseModel):
    """Schema for scheduled activity update."""
    activity_name: Optional[str] = Field(None, min_length=1, max_length=200)
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[dt_time] = None
    custom_cost: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None
    status: Optional[ActivityStatus] = None


class TripActivityResponse(BaseModel):
    """Schema for scheduled activity response."""
    id: int
    trip_stop_id: int
    activity_id: Optional[int] = None
    activity_name: str
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[dt_time] = None
    custom_cost: Optional[Decimal] = None
    resolved_cost: Decimal  # custom_cost, else catalog estimated_cost, else 0
    category: Optional[str] = None
    notes: Optional[str] = None
    status: ActivityStatus
    created_at: datetime

    class Config:
        from_attributes = True


class StopCreate(BaseModel):
    """Schema for adding a stop to a trip."""
    city_id: Optional[int] = None
    city_name: Optional[str] = Field(None, max_length=200)
    start_date: date
    end_date: date
    notes: Optional[str] = None


class StopUpdate(BaseModel):
    """Schema for stop update. Order is changed through the reorder endpoint only."""
    city_id: Optional[int] = None
    city_name: Optional[str] = Field(None, min_length=1, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None


class StopReorder(BaseModel):
    """Complete new ordering of a trip's stops."""
    model_config = ConfigDict(populate_by_name=True)

    stop_ids: List[int] = Field(..., alias="stopIds")


class StopResponse(BaseModel):
    """Schema for stop response with nested activities."""
    id: int
    trip_id: int
    city_id: Optional[int] = None
    city_name: str
    country: Optional[str] = None
    avg_daily_cost: Optional[Decimal] = None
    city_image: Optional[str] = None
    start_date: date
    end_date: date
    order_index: int
    notes: Optional[str] = None
    activities: List[TripActivityResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True


class TripDetailResponse(TripResponse):
    """Schema for detailed trip response with stops."""
    owner_name: str
    stops: List[StopResponse] = []
