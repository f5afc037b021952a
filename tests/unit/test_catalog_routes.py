import json

from conftest import bearer
from models import Movie, Seat
from services.booking_service import BookingService

from app import db


def send_json(client, method, url, payload, user=None):
    headers = bearer(user) if user is not None else {}
    return client.open(
        url,
        method=method,
        data=json.dumps(payload),
        content_type="application/json",
        headers=headers,
    )


# ---------------------------------------------------------------------------
# Movies
# ---------------------------------------------------------------------------

def test_movies_are_public(client, catalog):
    response = client.get("/api/movies")

    assert response.status_code == 200
    body = response.get_json()
    assert [movie["title"] for movie in body] == ["Arrival"]
    assert body[0]["posterUrl"] == ""

    single = client.get(f"/api/movies/{catalog.movie_id}")
    assert single.status_code == 200
    assert single.get_json()["duration"] == 116


def test_unknown_movie_returns_404(client):
    assert client.get("/api/movies/4242").status_code == 404
    assert client.get("/api/movies/not-a-number").status_code == 404


def test_admin_creates_updates_and_deletes_movie(client, admin):
    payload = {
        "title": "Dune",
        "description": "Spice.",
        "duration": 155,
        "genre": "Sci-Fi",
        "rating": 8.0,
        "posterUrl": "/posters/dune.png",
    }
    created = send_json(client, "POST", "/api/movies", payload, admin)
    assert created.status_code == 201
    movie_id = created.get_json()["id"]
    assert created.get_json()["posterUrl"] == "/posters/dune.png"

    updated = send_json(client, "PUT", f"/api/movies/{movie_id}", {"title": "Dune: Part One", "rating": 8.1}, admin)
    assert updated.status_code == 200
    body = updated.get_json()
    assert body["title"] == "Dune: Part One"
    assert body["rating"] == 8.1
    # PUT replaces the record
    assert body["duration"] == 0

    deleted = client.delete(f"/api/movies/{movie_id}", headers=bearer(admin))
    assert deleted.status_code == 204
    assert db.session.get(Movie, movie_id) is None
    # Deleting again is harmless
    assert client.delete(f"/api/movies/{movie_id}", headers=bearer(admin)).status_code == 204


def test_movie_writes_require_admin(client, customer):
    assert send_json(client, "POST", "/api/movies", {"title": "Nope"}).status_code == 401
    response = send_json(client, "POST", "/api/movies", {"title": "Nope"}, customer)
    assert response.status_code == 403
    assert response.get_json()["message"] == "forbidden"


def test_movie_validation(client, admin):
    response = send_json(client, "POST", "/api/movies", {"title": "", "rating": 11, "duration": -5}, admin)

    assert response.status_code == 400
    fields = {error["field"] for error in response.get_json()["errors"]}
    assert fields == {"title", "rating", "duration"}


def test_update_unknown_movie(client, admin):
    response = send_json(client, "PUT", "/api/movies/999", {"title": "Ghost"}, admin)

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Halls
# ---------------------------------------------------------------------------

def test_list_halls(client, catalog):
    response = client.get("/api/halls")

    assert response.status_code == 200
    body = response.get_json()
    assert [hall["name"] for hall in body] == ["Main", "Small"]
    assert body[0]["seatsPerRow"] == 3
    assert body[0]["rows"] == 4


def test_admin_creates_hall_with_seats(client, admin):
    response = send_json(client, "POST", "/api/halls", {"name": "Annex", "rows": 3, "seatsPerRow": 5}, admin)

    assert response.status_code == 201
    body = response.get_json()
    assert body["capacity"] == 15
    seats = Seat.query.filter_by(hall_id=body["id"]).all()
    assert len(seats) == 15
    assert sum(1 for seat in seats if seat.seat_type == "vip") == 10


def test_create_hall_requires_admin_and_valid_layout(client, admin, customer):
    assert send_json(client, "POST", "/api/halls", {"name": "X", "rows": 1, "seatsPerRow": 1}, customer).status_code == 403

    response = send_json(client, "POST", "/api/halls", {"name": "X", "rows": 0}, admin)
    assert response.status_code == 400
    fields = {error["field"] for error in response.get_json()["errors"]}
    assert fields == {"rows", "seatsPerRow"}


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

def test_list_and_get_sessions(client, catalog):
    response = client.get("/api/sessions")

    assert response.status_code == 200
    body = response.get_json()
    assert len(body) == 1
    assert body[0]["movieId"] == catalog.movie_id
    assert body[0]["hallId"] == catalog.hall_id
    assert body[0]["price"] == 1800
    assert body[0]["startTime"].startswith("2026-03-01T19:00:00")

    single = client.get(f"/api/sessions/{catalog.session_id}")
    assert single.status_code == 200
    assert client.get("/api/sessions/999").status_code == 404


def test_filter_sessions_by_movie_orders_by_start_time(client, catalog, admin):
    send_json(
        client, "POST", "/api/sessions",
        {"movieId": catalog.movie_id, "hallId": catalog.hall_id, "startTime": "2026-03-01T10:00:00Z", "price": 1500},
        admin,
    )

    body = client.get(f"/api/sessions?movieId={catalog.movie_id}").get_json()

    assert [session["price"] for session in body] == [1500, 1800]
    assert client.get("/api/sessions?movieId=12345").get_json() == []


def test_filter_sessions_with_invalid_movie_id(client):
    response = client.get("/api/sessions?movieId=abc")

    assert response.status_code == 400
    assert response.get_json()["message"] == "invalid movieId"


def test_create_session_converts_start_time_to_utc(client, catalog, admin):
    payload = {"movieId": catalog.movie_id, "hallId": catalog.hall_id, "startTime": "2026-04-01T20:00:00+02:00", "price": 2000}

    response = send_json(client, "POST", "/api/sessions", payload, admin)

    assert response.status_code == 201
    assert response.get_json()["startTime"].startswith("2026-04-01T18:00:00")


def test_create_session_checks_references(client, catalog, admin):
    base = {"startTime": "2026-04-01T20:00:00Z", "price": 2000}

    response = send_json(client, "POST", "/api/sessions", {**base, "movieId": 999, "hallId": catalog.hall_id}, admin)
    assert response.status_code == 400
    assert response.get_json()["message"] == "movie not found"

    response = send_json(client, "POST", "/api/sessions", {**base, "movieId": catalog.movie_id, "hallId": 999}, admin)
    assert response.status_code == 400
    assert response.get_json()["message"] == "hall not found"


def test_update_session(client, catalog, admin, customer):
    payload = {"movieId": catalog.movie_id, "hallId": catalog.other_hall_id, "startTime": "2026-05-01T09:30:00", "price": 990}

    assert send_json(client, "PUT", f"/api/sessions/{catalog.session_id}", payload, customer).status_code == 403
    assert send_json(client, "PUT", "/api/sessions/999", payload, admin).status_code == 404

    response = send_json(client, "PUT", f"/api/sessions/{catalog.session_id}", payload, admin)
    assert response.status_code == 200
    body = response.get_json()
    assert body["hallId"] == catalog.other_hall_id
    assert body["price"] == 990


def test_session_seats_mark_booked(client, catalog, customer):
    BookingService().create(customer.id, catalog.session_id, [catalog.regular[0], catalog.vip[0]])

    response = client.get(f"/api/sessions/{catalog.session_id}/seats")

    assert response.status_code == 200
    seats = response.get_json()
    assert len(seats) == 12
    assert [(seat["rowNumber"], seat["seatNumber"]) for seat in seats[:4]] == [(1, 1), (1, 2), (1, 3), (2, 1)]
    booked = {seat["id"] for seat in seats if seat["booked"]}
    assert booked == {catalog.regular[0], catalog.vip[0]}
    assert {seat["seatType"] for seat in seats if seat["rowNumber"] >= 3} == {"vip"}


def test_session_seats_generated_on_demand(client, admin):
    hall = send_json(client, "POST", "/api/halls", {"name": "Late", "rows": 2, "seatsPerRow": 2}, admin).get_json()
    movie = send_json(client, "POST", "/api/movies", {"title": "Heat"}, admin).get_json()
    session = send_json(
        client, "POST", "/api/sessions",
        {"movieId": movie["id"], "hallId": hall["id"], "startTime": "2026-06-01T18:00:00", "price": 1000},
        admin,
    ).get_json()
    Seat.query.filter_by(hall_id=hall["id"]).delete()
    db.session.commit()

    seats = client.get(f"/api/sessions/{session['id']}/seats").get_json()

    assert len(seats) == 4
    assert not any(seat["booked"] for seat in seats)


def test_session_seats_unknown_session(client):
    assert client.get("/api/sessions/31337/seats").status_code == 404


def test_path_ids_out_of_range_are_not_found(client, admin):
    assert client.get(f"/api/movies/{2**70}").status_code == 404
    assert client.get(f"/api/sessions/{2**63}/seats").status_code == 404
    assert client.delete(f"/api/movies/{2**70}", headers=bearer(admin)).status_code == 404
    # The largest storable id still reaches the view
    assert client.get(f"/api/movies/{2**63 - 1}").status_code == 404
    assert client.get(f"/api/sessions/{2**63 - 1}").get_json()["message"] == "not found"


def test_filter_sessions_with_movie_id_out_of_range(client):
    response = client.get(f"/api/sessions?movieId={2**70}")

    assert response.status_code == 400
    assert response.get_json()["message"] == "invalid movieId"


def test_create_session_rejects_ids_out_of_range(client, catalog, admin):
    payload = {"movieId": 2**70, "hallId": 0, "startTime": "2026-04-01T20:00:00Z", "price": 2000}

    response = send_json(client, "POST", "/api/sessions", payload, admin)

    assert response.status_code == 400
    body = response.get_json()
    assert body["message"] == "Invalid input"
    assert {error["field"] for error in body["errors"]} == {"movieId", "hallId"}
