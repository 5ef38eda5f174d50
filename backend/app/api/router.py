"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import (
    auth, trips, stops, activities, budget, cities, favorites
)
from app.schemas.common import ErrorResponse

# Error envelope documented for every route; bodies come from the handlers in app.main
api_router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    }
)

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(trips.router)
api_router.include_router(stops.router)
api_router.include_router(activities.router)
api_router.include_router(budget.router)
api_router.include_router(cities.router)
api_router.include_router(favorites.router)
