"""
Pydantic schemas for the trip budget report.
"""
from pydantic import BaseModel
from typing import List
from datetime import date


class BudgetBreakdown(BaseModel):
    """Top-level cost split."""
    activities: int
    accommodation: int
    transport: int


class CategoryCost(BaseModel):
    """Activity cost for one catalog category ("other" when unlinked)."""
    category: str
    cost: int


class CityCost(BaseModel):
    """Estimated spend for one stop: days_in_stop x daily cost."""
    stop_id: int
    city: str
    days: int
    daily_cost: int
    cost: int


class DailyCost(BaseModel):
    """One point of the daily cost series."""
    date: date
    cost: int
    activities: List[str] = []


class TripBudget(BaseModel):
    """Budget report for a trip, recomputed on every request."""
    trip_id: int
    trip_title: str
    total_days: int
    currency: str
    grand_total: int
    breakdown: BudgetBreakdown
    category_breakdown: List[CategoryCost] = []
    city_breakdown: List[CityCost] = []
    daily_costs: List[DailyCost] = []
