"""
Read-only catalog of cities and suggested activities.
"""
from sqlalchemy import Column, String, Numeric, Text, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class City(BaseModel):
    """Catalog city with a baseline daily spend used for budget estimation."""
    __tablename__ = "cities"

    name = Column(String(200), nullable=False, index=True)
    country = Column(String(100), nullable=False, index=True)
    region = Column(String(100), nullable=True, index=True)
    avg_daily_cost = Column(Numeric(10, 2), nullable=True)
    popularity_score = Column(Integer, default=0, nullable=False)
    image_url = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)

    # Relationships
    activities = relationship("Activity", back_populates="city", cascade="all, delete-orphan")


class Activity(BaseModel):
    """Catalog activity; its estimated_cost is the fallback for scheduled activities."""
    __tablename__ = "activities"

    city_id = Column(Integer, ForeignKey("cities.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    estimated_cost = Column(Numeric(10, 2), nullable=True)
    duration = Column(Integer, nullable=True)  # Minutes
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    rating = Column(Numeric(2, 1), nullable=True)

    # Relationships
    city = relationship("City", back_populates="activities")
