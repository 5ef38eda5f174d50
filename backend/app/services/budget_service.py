"""
Budget service: derived cost report for a trip.

The report is never persisted; it is recomputed from the trip's stops and
scheduled activities on every request. All arithmetic is done in Decimal and
amounts are rounded to whole units only when the response is built.
"""
from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Sequence
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.utils import round_money
from app.models.trip import Trip, TripStop, TripActivity
from app.schemas.budget import TripBudget, BudgetBreakdown, CategoryCost, CityCost, DailyCost
from app.services.activity_service import resolve_activity_cost, activity_category, sort_activities
from app.services.stop_service import list_stops


def days_inclusive(start_date: date, end_date: date) -> int:
    """Number of calendar days in [start_date, end_date], counting both ends."""
    return (end_date - start_date).days + 1


def stop_daily_cost(stop: TripStop) -> Decimal:
    """The stop's city avg_daily_cost, or the configured default when unknown."""
    city = stop.city
    if city is not None and city.avg_daily_cost:
        return Decimal(city.avg_daily_cost)
    return Decimal(str(settings.DEFAULT_CITY_DAILY_COST))


def compute_trip_budget(trip: Trip, stops: Sequence[TripStop], currency: str = None) -> TripBudget:
    """Build the budget report from already-loaded stops (with city and activities)."""
    accommodation_share = Decimal(str(settings.ACCOMMODATION_SHARE))
    transport_per_stop = Decimal(str(settings.TRANSPORT_COST_PER_STOP))

    activities: List[TripActivity] = []
    for stop in stops:
        activities.extend(sort_activities(stop.activities))

    # Activities total and category breakdown
    activity_total = Decimal(0)
    category_costs: Dict[str, Decimal] = OrderedDict()
    for trip_activity in activities:
        cost = resolve_activity_cost(trip_activity)
        activity_total += cost
        category = activity_category(trip_activity)
        category_costs[category] = category_costs.get(category, Decimal(0)) + cost

    # Per-stop city cost, accommodation and transport estimates
    city_breakdown = []
    accommodation_total = Decimal(0)
    transport_total = Decimal(0)
    for stop in stops:
        days = days_inclusive(stop.start_date, stop.end_date)
        daily_cost = stop_daily_cost(stop)
        city_cost = days * daily_cost

        city_breakdown.append(CityCost(
            stop_id=stop.id,
            city=stop.city_name,
            days=days,
            daily_cost=round_money(daily_cost),
            cost=round_money(city_cost)
        ))
        accommodation_total += city_cost * accommodation_share
        transport_total += transport_per_stop

    grand_total = activity_total + accommodation_total + transport_total

    # Daily series over the whole trip, one point per day
    total_days = days_inclusive(trip.start_date, trip.end_date)
    daily_accommodation = accommodation_total / total_days if total_days > 0 else Decimal(0)

    activities_by_day: Dict[date, List[TripActivity]] = {}
    for trip_activity in activities:
        if trip_activity.scheduled_date is not None:
            activities_by_day.setdefault(trip_activity.scheduled_date, []).append(trip_activity)

    daily_costs = []
    for offset in range(max(total_days, 0)):
        day = trip.start_date + timedelta(days=offset)
        day_activities = activities_by_day.get(day, [])
        day_cost = sum((resolve_activity_cost(a) for a in day_activities), Decimal(0))
        daily_costs.append(DailyCost(
            date=day,
            cost=round_money(day_cost + daily_accommodation),
            activities=[a.activity_name for a in day_activities]
        ))

    return TripBudget(
        trip_id=trip.id,
        trip_title=trip.title,
        total_days=total_days,
        currency=currency or settings.DEFAULT_CURRENCY,
        grand_total=round_money(grand_total),
        breakdown=BudgetBreakdown(
            activities=round_money(activity_total),
            accommodation=round_money(accommodation_total),
            transport=round_money(transport_total)
        ),
        category_breakdown=[
            CategoryCost(category=category, cost=round_money(cost))
            for category, cost in category_costs.items()
        ],
        city_breakdown=city_breakdown,
        daily_costs=daily_costs
    )


def get_trip_budget(trip: Trip, db: Session) -> TripBudget:
    """Load the trip's itinerary and compute its budget report."""
    stops = list_stops(trip.id, db)
    preferences = (trip.owner.preferences if trip.owner else None) or {}
    currency = preferences.get("currency") or settings.DEFAULT_CURRENCY
    return compute_trip_budget(trip, stops, currency=currency)
