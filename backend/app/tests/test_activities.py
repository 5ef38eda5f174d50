"""
Tests for scheduled activities and the activity catalog.
"""
from decimal import Decimal
from types import SimpleNamespace
from app.core.config import settings
from app.models.city import Activity
from app.services.activity_service import resolve_activity_cost, activity_category


def test_resolve_activity_cost_fallback_chain():
    catalog = SimpleNamespace(estimated_cost=Decimal("35.00"), category="sightseeing")

    assert resolve_activity_cost(SimpleNamespace(custom_cost=Decimal("12.50"), catalog_activity=catalog)) == Decimal("12.50")
    assert resolve_activity_cost(SimpleNamespace(custom_cost=Decimal("0"), catalog_activity=catalog)) == 0
    assert resolve_activity_cost(SimpleNamespace(custom_cost=None, catalog_activity=catalog)) == Decimal("35.00")
    assert resolve_activity_cost(SimpleNamespace(custom_cost=None, catalog_activity=None)) == 0

    assert activity_category(SimpleNamespace(catalog_activity=catalog)) == "sightseeing"
    assert activity_category(SimpleNamespace(catalog_activity=None)) == "other"


def test_add_catalog_activity_to_stop(client, make_user, make_trip, make_stop, db_session):
    louvre = db_session.query(Activity).filter(Activity.name == "Louvre Museum").one()
    headers, _ = make_user()
    trip = make_trip(headers)
    stop = make_stop(headers, trip["id"])

    response = client.post(
        f"/api/activities/stops/{stop['id']}",
        json={"activity_id": louvre.id, "scheduled_date": "2024-03-02", "scheduled_time": "10:30:00"},
        headers=headers
    )
    assert response.status_code == 201
    activity = response.json()["data"]
    assert activity["activity_name"] == "Louvre Museum"
    assert activity["category"] == "culture"
    assert activity["custom_cost"] is None
    assert float(activity["resolved_cost"]) == 22
    assert activity["status"] == "planned"


def test_add_custom_activity_to_stop(client, make_user, make_trip, make_stop):
    headers, _ = make_user()
    trip = make_trip(headers)
    stop = make_stop(headers, trip["id"])

    response = client.post(
        f"/api/activities/stops/{stop['id']}",
        json={"activity_name": "Picnic by the canal", "custom_cost": 18.5},
        headers=headers
    )
    assert response.status_code == 201
    activity = response.json()["data"]
    assert activity["activity_id"] is None
    assert activity["category"] is None
    assert float(activity["resolved_cost"]) == 18.5


def test_add_activity_validation(client, make_user, make_trip, make_stop):
    headers, _ = make_user()
    trip = make_trip(headers)
    stop = make_stop(headers, trip["id"])

    response = client.post(f"/api/activities/stops/{stop['id']}", json={}, headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Please provide activity_name or activity_id"

    response = client.post(f"/api/activities/stops/{stop['id']}", json={"activity_id": 9999}, headers=headers)
    assert response.status_code == 404

    response = client.post(
        f"/api/activities/stops/{stop['id']}",
        json={"activity_name": "Negative", "custom_cost": -5},
        headers=headers
    )
    assert response.status_code == 400

    response = client.post("/api/activities/stops/9999", json={"activity_name": "Nowhere"}, headers=headers)
    assert response.status_code == 404


def test_scheduled_date_must_fall_within_stop(client, make_user, make_trip, make_stop, monkeypatch):
    headers, _ = make_user()
    trip = make_trip(headers, start_date="2024-03-01", end_date="2024-03-10")
    stop = make_stop(headers, trip["id"], start_date="2024-03-01", end_date="2024-03-03")

    for day in ("2030-01-01", "2024-02-29", "2024-03-04"):
        response = client.post(
            f"/api/activities/stops/{stop['id']}",
            json={"activity_name": "Elsewhere", "scheduled_date": day},
            headers=headers
        )
        assert response.status_code == 400
        assert "within the stop dates" in response.json()["error"]

    activity = client.post(
        f"/api/activities/stops/{stop['id']}",
        json={"activity_name": "Last day", "scheduled_date": "2024-03-03"},
        headers=headers
    ).json()["data"]

    response = client.put(
        f"/api/activities/trip-activities/{activity['id']}",
        json={"scheduled_date": "2024-03-05"},
        headers=headers
    )
    assert response.status_code == 400

    stops = client.get(f"/api/trips/{trip['id']}/stops", headers=headers).json()["data"]
    assert [a["scheduled_date"] for a in stops[0]["activities"]] == ["2024-03-03"]

    monkeypatch.setattr(settings, "STRICT_STOP_DATES", False)
    response = client.put(
        f"/api/activities/trip-activities/{activity['id']}",
        json={"scheduled_date": "2024-03-05"},
        headers=headers
    )
    assert response.status_code == 200


def test_update_activity(client, make_user, make_trip, make_stop, db_session):
    cruise = db_session.query(Activity).filter(Activity.name == "Seine River Cruise").one()
    headers, _ = make_user()
    trip = make_trip(headers)
    stop = make_stop(headers, trip["id"])
    activity = client.post(
        f"/api/activities/stops/{stop['id']}",
        json={"activity_id": cruise.id, "custom_cost": 25},
        headers=headers
    ).json()["data"]

    response = client.put(
        f"/api/activities/trip-activities/{activity['id']}",
        json={"status": "booked", "notes": "Sunset slot", "custom_cost": None},
        headers=headers
    )
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["status"] == "booked"
    assert updated["notes"] == "Sunset slot"
    # Clearing the override falls back to the catalog estimate
    assert updated["custom_cost"] is None
    assert float(updated["resolved_cost"]) == 18


def test_activity_mutations_require_trip_owner(client, make_user, make_trip, make_stop):
    owner_headers, _ = make_user()
    other_headers, _ = make_user()
    trip = make_trip(owner_headers, is_public=True)
    stop = make_stop(owner_headers, trip["id"])
    activity = client.post(
        f"/api/activities/stops/{stop['id']}", json={"activity_name": "Museum"}, headers=owner_headers
    ).json()["data"]

    assert client.post(
        f"/api/activities/stops/{stop['id']}", json={"activity_name": "Sneaky"}, headers=other_headers
    ).status_code == 403
    assert client.put(
        f"/api/activities/trip-activities/{activity['id']}", json={"notes": "mine"}, headers=other_headers
    ).status_code == 403
    assert client.delete(
        f"/api/activities/trip-activities/{activity['id']}", headers=other_headers
    ).status_code == 403
    assert client.delete("/api/activities/trip-activities/9999", headers=owner_headers).status_code == 404


def test_remove_activity(client, make_user, make_trip, make_stop):
    headers, _ = make_user()
    trip = make_trip(headers)
    stop = make_stop(headers, trip["id"])
    activity = client.post(
        f"/api/activities/stops/{stop['id']}", json={"activity_name": "Museum"}, headers=headers
    ).json()["data"]

    response = client.delete(f"/api/activities/trip-activities/{activity['id']}", headers=headers)
    assert response.status_code == 200

    stops = client.get(f"/api/trips/{trip['id']}/stops", headers=headers).json()["data"]
    assert stops[0]["activities"] == []


def test_search_catalog(client):
    response = client.get("/api/activities", params={"category": "food"})
    assert response.status_code == 200
    names = {a["name"] for a in response.json()["data"]}
    assert names == {"Montmartre Food Tour", "Tsukiji Outer Market"}

    response = client.get("/api/activities", params={"search": "tram"})
    assert [a["name"] for a in response.json()["data"]] == ["Tram 28 Ride"]

    response = client.get("/api/activities", params={"max_cost": 0})
    assert {a["name"] for a in response.json()["data"]} == {"Meiji Shrine", "Fushimi Inari Hike"}


def test_catalog_categories(client):
    response = client.get("/api/activities/categories")
    assert response.status_code == 200
    assert response.json()["data"] == ["adventure", "culture", "entertainment", "food", "sightseeing"]
