"""
City catalog routes (read-only, no authentication).
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional
from app.core.utils import format_response
from app.db.session import get_db
from app.models.city import City, Activity
from app.schemas.common import APIResponse
from app.schemas.city import CityResponse, CityDetailResponse, ActivityResponse

router = APIRouter(prefix="/cities", tags=["cities"])

CITY_SORTS = {
    "popularity": (City.popularity_score.desc(),),
    "cost_low": (City.avg_daily_cost.asc(),),
    "cost_high": (City.avg_daily_cost.desc(),),
}


@router.get("", response_model=APIResponse[List[CityResponse]])
async def list_cities(
    search: Optional[str] = None,
    country: Optional[str] = None,
    region: Optional[str] = None,
    sort: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List cities, filtered by name/country search, country or region."""
    query = db.query(City)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(City.name.ilike(pattern), City.country.ilike(pattern)))
    if country:
        query = query.filter(City.country == country)
    if region:
        query = query.filter(City.region == region)

    order = CITY_SORTS.get(sort, (City.name.asc(),))
    cities = query.order_by(*order, City.id).all()
    return format_response(data=[CityResponse.model_validate(c) for c in cities])


@router.get("/popular", response_model=APIResponse[List[CityResponse]])
async def popular_cities(db: Session = Depends(get_db)):
    """Six most popular cities."""
    cities = db.query(City).order_by(City.popularity_score.desc(), City.id).limit(6).all()
    return format_response(data=[CityResponse.model_validate(c) for c in cities])


@router.get("/meta/countries", response_model=APIResponse[List[str]])
async def list_countries(db: Session = Depends(get_db)):
    """Distinct countries in the catalog."""
    rows = db.query(City.country).distinct().order_by(City.country).all()
    return format_response(data=[row[0] for row in rows])


@router.get("/{city_id}", response_model=APIResponse[CityDetailResponse])
async def get_city(city_id: int, db: Session = Depends(get_db)):
    """Get a city with its catalog activities."""
    city = db.query(City).filter(City.id == city_id).first()
    if not city:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="City not found"
        )

    activities = db.query(Activity).filter(
        Activity.city_id == city_id
    ).order_by(Activity.category, Activity.name).all()

    detail = CityDetailResponse(
        **CityResponse.model_validate(city).model_dump(),
        activities=[ActivityResponse.model_validate(a) for a in activities]
    )
    return format_response(data=detail)
