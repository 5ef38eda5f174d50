"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User, PasswordResetToken
from app.models.city import City, Activity
from app.models.trip import Trip, TripStop, TripActivity, ActivityStatus
from app.models.favorite import Favorite

__all__ = [
    "User",
    "PasswordResetToken",
    "City",
    "Activity",
    "Trip",
    "TripStop",
    "TripActivity",
    "ActivityStatus",
    "Favorite",
]
