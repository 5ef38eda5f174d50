"""
Sample catalog data: cities and their suggested activities.
"""
import logging
from decimal import Decimal
from sqlalchemy.orm import Session
from app.models.city import City, Activity

logger = logging.getLogger(__name__)

SAMPLE_CITIES = [
    {
        "name": "Paris", "country": "France", "region": "Europe",
        "avg_daily_cost": Decimal("180"), "popularity_score": 98,
        "description": "Museums, cafes and the Seine.",
        "activities": [
            ("Louvre Museum", "culture", Decimal("22"), 180),
            ("Seine River Cruise", "sightseeing", Decimal("18"), 60),
            ("Eiffel Tower Summit", "sightseeing", Decimal("35"), 120),
            ("Montmartre Food Tour", "food", Decimal("95"), 180),
        ],
    },
    {
        "name": "Tokyo", "country": "Japan", "region": "Asia",
        "avg_daily_cost": Decimal("150"), "popularity_score": 96,
        "description": "Neon districts, shrines and food markets.",
        "activities": [
            ("Tsukiji Outer Market", "food", Decimal("30"), 120),
            ("Meiji Shrine", "culture", Decimal("0"), 90),
            ("teamLab Planets", "entertainment", Decimal("28"), 120),
        ],
    },
    {
        "name": "Lisbon", "country": "Portugal", "region": "Europe",
        "avg_daily_cost": Decimal("95"), "popularity_score": 85,
        "description": "Hills, trams and pastel de nata.",
        "activities": [
            ("Tram 28 Ride", "sightseeing", Decimal("3"), 45),
            ("Fado Night", "entertainment", Decimal("40"), 150),
            ("Sintra Day Trip", "adventure", Decimal("65"), 480),
        ],
    },
    {
        "name": "New York", "country": "United States", "region": "North America",
        "avg_daily_cost": Decimal("220"), "popularity_score": 97,
        "description": "Broadway, parks and skyline views.",
        "activities": [
            ("Broadway Show", "entertainment", Decimal("120"), 150),
            ("Central Park Bike Tour", "adventure", Decimal("45"), 120),
            ("Metropolitan Museum of Art", "culture", Decimal("30"), 180),
        ],
    },
    {
        "name": "Kyoto", "country": "Japan", "region": "Asia",
        "avg_daily_cost": Decimal("120"), "popularity_score": 90,
        "description": "Temples, gardens and tea houses.",
        "activities": [
            ("Fushimi Inari Hike", "adventure", Decimal("0"), 150),
            ("Tea Ceremony", "culture", Decimal("45"), 60),
        ],
    },
]


def seed_catalog(db: Session) -> int:
    """Insert the sample catalog if no cities exist yet. Returns the number of cities added."""
    if db.query(City).count() > 0:
        logger.info("Catalog already seeded, skipping")
        return 0

    for entry in SAMPLE_CITIES:
        data = dict(entry)
        activities = data.pop("activities")
        city = City(**data)
        for name, category, cost, duration in activities:
            city.activities.append(Activity(
                name=name,
                category=category,
                estimated_cost=cost,
                duration=duration
            ))
        db.add(city)

    db.commit()
    logger.info(f"Seeded {len(SAMPLE_CITIES)} cities")
    return len(SAMPLE_CITIES)
