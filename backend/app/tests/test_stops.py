"""
Tests for stop ordering: add, delete, reorder and the contiguous order_index invariant.
"""
import random
import pytest
from app.core.config import settings
from app.models.trip import TripActivity


def _indices(client, headers, trip_id):
    response = client.get(f"/api/trips/{trip_id}/stops", headers=headers)
    assert response.status_code == 200
    stops = response.json()["data"]
    return [(s["id"], s["order_index"]) for s in stops]


def _assert_contiguous(pairs):
    assert sorted(index for _, index in pairs) == list(range(len(pairs)))


def test_add_stop_assigns_next_index(client, make_user, make_trip, make_stop):
    headers, _ = make_user()
    trip = make_trip(headers)

    first = make_stop(headers, trip["id"], city_name="Paris")
    second = make_stop(headers, trip["id"], city_name="Lyon", start_date="2024-03-04", end_date="2024-03-05")

    assert first["order_index"] == 0
    assert second["order_index"] == 1
    assert second["activities"] == []


def test_add_stop_with_catalog_city_uses_its_name(client, make_user, make_trip, db_session):
    from app.models.city import City
    tokyo = db_session.query(City).filter(City.name == "Tokyo").one()
    headers, _ = make_user()
    trip = make_trip(headers)

    response = client.post(
        f"/api/trips/{trip['id']}/stops",
        json={"city_id": tokyo.id, "start_date": "2024-03-02", "end_date": "2024-03-04"},
        headers=headers
    )
    assert response.status_code == 201
    stop = response.json()["data"]
    assert stop["city_name"] == "Tokyo"
    assert stop["country"] == "Japan"
    assert float(stop["avg_daily_cost"]) == 150


def test_add_stop_requires_city(client, make_user, make_trip):
    headers, _ = make_user()
    trip = make_trip(headers)
    response = client.post(
        f"/api/trips/{trip['id']}/stops",
        json={"start_date": "2024-03-02", "end_date": "2024-03-04"},
        headers=headers
    )
    assert response.status_code == 400


def test_add_stop_rejects_inverted_dates(client, make_user, make_trip):
    headers, _ = make_user()
    trip = make_trip(headers)
    response = client.post(
        f"/api/trips/{trip['id']}/stops",
        json={"city_name": "Rome", "start_date": "2024-03-05", "end_date": "2024-03-04"},
        headers=headers
    )
    assert response.status_code == 400


def test_add_stop_outside_trip_dates(client, make_user, make_trip, monkeypatch):
    headers, _ = make_user()
    trip = make_trip(headers, start_date="2024-03-01", end_date="2024-03-10")
    payload = {"city_name": "Rome", "start_date": "2024-02-27", "end_date": "2024-03-02"}

    response = client.post(f"/api/trips/{trip['id']}/stops", json=payload, headers=headers)
    assert response.status_code == 400
    assert "within the trip dates" in response.json()["error"]

    monkeypatch.setattr(settings, "STRICT_STOP_DATES", False)
    response = client.post(f"/api/trips/{trip['id']}/stops", json=payload, headers=headers)
    assert response.status_code == 201


def test_stop_mutations_require_owner(client, make_user, make_trip, make_stop):
    owner_headers, _ = make_user()
    other_headers, _ = make_user()
    trip = make_trip(owner_headers)
    stop = make_stop(owner_headers, trip["id"])
    payload = {"city_name": "Rome", "start_date": "2024-03-02", "end_date": "2024-03-04"}

    assert client.post(f"/api/trips/{trip['id']}/stops", json=payload, headers=other_headers).status_code == 403
    assert client.post(f"/api/trips/{trip['id']}/stops", json=payload).status_code == 401
    assert client.put(
        f"/api/trips/{trip['id']}/stops/{stop['id']}", json={"notes": "x"}, headers=other_headers
    ).status_code == 403
    assert client.delete(f"/api/trips/{trip['id']}/stops/{stop['id']}", headers=other_headers).status_code == 403
    assert client.put(
        f"/api/trips/{trip['id']}/stops/reorder", json={"stop_ids": [stop["id"]]}, headers=other_headers
    ).status_code == 403
    assert client.post("/api/trips/9999/stops", json=payload, headers=owner_headers).status_code == 404


def test_update_stop_keeps_order(client, make_user, make_trip, make_stop):
    headers, _ = make_user()
    trip = make_trip(headers)
    make_stop(headers, trip["id"])
    second = make_stop(headers, trip["id"], city_name="Lyon")

    response = client.put(
        f"/api/trips/{trip['id']}/stops/{second['id']}",
        json={"city_name": "Marseille", "notes": "By the sea", "end_date": "2024-03-05"},
        headers=headers
    )
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["city_name"] == "Marseille"
    assert updated["notes"] == "By the sea"
    assert updated["end_date"] == "2024-03-05"
    assert updated["order_index"] == 1


def test_update_stop_dates_must_cover_activities(client, make_user, make_trip, make_stop):
    headers, _ = make_user()
    trip = make_trip(headers)
    stop = make_stop(headers, trip["id"], start_date="2024-03-01", end_date="2024-03-04")
    client.post(
        f"/api/activities/stops/{stop['id']}",
        json={"activity_name": "Market", "scheduled_date": "2024-03-04"},
        headers=headers
    )

    response = client.put(
        f"/api/trips/{trip['id']}/stops/{stop['id']}", json={"end_date": "2024-03-03"}, headers=headers
    )
    assert response.status_code == 400
    assert "cover its scheduled activities" in response.json()["error"]

    response = client.put(
        f"/api/trips/{trip['id']}/stops/{stop['id']}", json={"start_date": "2024-03-04"}, headers=headers
    )
    assert response.status_code == 200


def test_update_stop_from_another_trip_is_not_found(client, make_user, make_trip, make_stop):
    headers, _ = make_user()
    trip_a = make_trip(headers)
    trip_b = make_trip(headers)
    stop_b = make_stop(headers, trip_b["id"])

    response = client.put(
        f"/api/trips/{trip_a['id']}/stops/{stop_b['id']}", json={"notes": "x"}, headers=headers
    )
    assert response.status_code == 404


def test_delete_stop_closes_gap(client, make_user, make_trip, make_stop):
    headers, _ = make_user()
    trip = make_trip(headers)
    stops = [make_stop(headers, trip["id"], city_name=f"City {i}") for i in range(4)]

    response = client.delete(f"/api/trips/{trip['id']}/stops/{stops[1]['id']}", headers=headers)
    assert response.status_code == 200

    pairs = _indices(client, headers, trip["id"])
    assert pairs == [(stops[0]["id"], 0), (stops[2]["id"], 1), (stops[3]["id"], 2)]


def test_delete_then_add_appends_at_end(client, make_user, make_trip, make_stop):
    headers, _ = make_user()
    trip = make_trip(headers)
    stops = [make_stop(headers, trip["id"], city_name=f"City {i}") for i in range(3)]

    client.delete(f"/api/trips/{trip['id']}/stops/{stops[0]['id']}", headers=headers)
    added = make_stop(headers, trip["id"], city_name="Newcomer")

    assert added["order_index"] == 2
    _assert_contiguous(_indices(client, headers, trip["id"]))


def test_delete_stop_removes_its_activities(client, make_user, make_trip, make_stop, db_session):
    headers, _ = make_user()
    trip = make_trip(headers)
    stop = make_stop(headers, trip["id"])
    client.post(f"/api/activities/stops/{stop['id']}", json={"activity_name": "Walk"}, headers=headers)

    client.delete(f"/api/trips/{trip['id']}/stops/{stop['id']}", headers=headers)
    assert db_session.query(TripActivity).filter(TripActivity.trip_stop_id == stop["id"]).count() == 0


def test_reorder_applies_permutation(client, make_user, make_trip, make_stop):
    headers, _ = make_user()
    trip = make_trip(headers)
    ids = [make_stop(headers, trip["id"], city_name=f"City {i}")["id"] for i in range(3)]
    new_order = [ids[2], ids[0], ids[1]]

    response = client.put(
        f"/api/trips/{trip['id']}/stops/reorder", json={"stopIds": new_order}, headers=headers
    )
    assert response.status_code == 200
    returned = response.json()["data"]
    assert [s["id"] for s in returned] == new_order
    assert [s["order_index"] for s in returned] == [0, 1, 2]


@pytest.mark.parametrize("bad_order", [
    "partial",
    "duplicate",
    "foreign",
])
def test_reorder_rejects_non_permutations(client, make_user, make_trip, make_stop, bad_order):
    headers, _ = make_user()
    trip = make_trip(headers)
    other_trip = make_trip(headers)
    ids = [make_stop(headers, trip["id"], city_name=f"City {i}")["id"] for i in range(3)]
    foreign = make_stop(headers, other_trip["id"])["id"]

    payloads = {
        "partial": [ids[1], ids[0]],
        "duplicate": [ids[0], ids[0], ids[1]],
        "foreign": [ids[2], ids[1], foreign],
    }
    response = client.put(
        f"/api/trips/{trip['id']}/stops/reorder", json={"stop_ids": payloads[bad_order]}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["success"] is False

    # Nothing changed
    assert _indices(client, headers, trip["id"]) == [(ids[0], 0), (ids[1], 1), (ids[2], 2)]


def test_reorder_requires_list(client, make_user, make_trip):
    headers, _ = make_user()
    trip = make_trip(headers)
    response = client.put(
        f"/api/trips/{trip['id']}/stops/reorder", json={"stop_ids": "1,2"}, headers=headers
    )
    assert response.status_code == 400


@pytest.mark.parametrize("seed", range(5))
def test_random_operation_sequences_keep_indices_contiguous(client, make_user, make_trip, make_stop, seed):
    rng = random.Random(seed)
    headers, _ = make_user()
    trip = make_trip(headers)
    expected_order = []

    for _ in range(25):
        operation = rng.choice(["add", "add", "delete", "reorder"])
        if operation == "add" or not expected_order:
            stop = make_stop(headers, trip["id"], city_name=f"City {rng.randint(1, 99)}")
            assert stop["order_index"] == len(expected_order)
            expected_order.append(stop["id"])
        elif operation == "delete":
            victim = rng.choice(expected_order)
            response = client.delete(f"/api/trips/{trip['id']}/stops/{victim}", headers=headers)
            assert response.status_code == 200
            expected_order.remove(victim)
        else:
            rng.shuffle(expected_order)
            response = client.put(
                f"/api/trips/{trip['id']}/stops/reorder", json={"stop_ids": expected_order}, headers=headers
            )
            assert response.status_code == 200

        pairs = _indices(client, headers, trip["id"])
        _assert_contiguous(pairs)
        assert [stop_id for stop_id, _ in pairs] == expected_order
