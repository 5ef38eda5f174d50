"""
Favorite city routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.core.utils import format_response
from app.db.session import get_db
from app.models.user import User
from app.models.city import City
from app.models.favorite import Favorite
from app.schemas.common import APIResponse
from app.schemas.city import CityResponse, FavoriteCityResponse, FavoriteCreate
from app.api.dependencies import get_current_user

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=APIResponse[List[FavoriteCityResponse]])
async def get_favorites(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the current user's favorite cities, most recent first."""
    rows = db.query(City, Favorite.created_at).join(
        Favorite, Favorite.city_id == City.id
    ).filter(
        Favorite.user_id == current_user.id
    ).order_by(Favorite.created_at.desc(), Favorite.id.desc()).all()

    favorites = [
        FavoriteCityResponse(**CityResponse.model_validate(city).model_dump(), favorited_at=favorited_at)
        for city, favorited_at in rows
    ]
    return format_response(data=favorites)


@router.post("", response_model=APIResponse[None], status_code=status.HTTP_201_CREATED)
async def add_favorite(
    favorite: FavoriteCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a city to favorites."""
    if not favorite.city_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="City ID is required"
        )

    city = db.query(City).filter(City.id == favorite.city_id).first()
    if not city:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="City not found"
        )

    existing = db.query(Favorite).filter(
        Favorite.user_id == current_user.id,
        Favorite.city_id == city.id
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="City is already in favorites"
        )

    db.add(Favorite(user_id=current_user.id, city_id=city.id))
    db.commit()
    return format_response(message="Added to favorites")


@router.delete("/{city_id}", response_model=APIResponse[None])
async def remove_favorite(
    city_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a city from favorites. Removing a non-favorite is not an error."""
    db.query(Favorite).filter(
        Favorite.user_id == current_user.id,
        Favorite.city_id == city_id
    ).delete(synchronize_session=False)
    db.commit()
    return format_response(message="Removed from favorites")
