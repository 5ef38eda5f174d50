"""
Pydantic schemas for the city and activity catalog and for favorites.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


class ActivityResponse(BaseModel):
    """Schema for catalog activity response."""
    id: int
    city_id: Optional[int] = None
    name: str
    category: str
    estimated_cost: Optional[Decimal] = None
    duration: Optional[int] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    rating: Optional[Decimal] = None

    class Config:
        from_attributes = True


class CityResponse(BaseModel):
    """Schema for catalog city response."""
    id: int
    name: str
    country: str
    region: Optional[str] = None
    avg_daily_cost: Optional[Decimal] = None
    popularity_score: int
    image_url: Optional[str] = None
    description: Optional[str] = None

    class Config:
        from_attributes = True


class CityDetailResponse(CityResponse):
    """City with its catalog activities."""
    activities: List[ActivityResponse] = []


class FavoriteCityResponse(CityResponse):
    """Favorite city with the time it was bookmarked."""
    favorited_at: datetime


class FavoriteCreate(BaseModel):
    """Schema for adding a favorite."""
    model_config = ConfigDict(populate_by_name=True)

    city_id: Optional[int] = Field(None, alias="cityId")
