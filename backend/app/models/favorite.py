"""
Favorite model for bookmarked cities.
"""
from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Favorite(BaseModel):
    """A user's bookmark on a catalog city."""
    __tablename__ = "favorites"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    city_id = Column(Integer, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="favorites")
    city = relationship("City")

    # Unique constraint: one favorite per user per city
    __table_args__ = (
        UniqueConstraint('user_id', 'city_id', name='uq_user_city_favorite'),
    )
