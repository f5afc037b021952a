import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("SECRET_KEY", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-with-enough-length")
os.environ.setdefault("PEPPER", "test-pepper")
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEED_ON_STARTUP"] = "0"

from app import app, db
from middleware import issue_token
from models import ROLE_ADMIN, ROLE_CASHIER, ROLE_CUSTOMER, SEAT_REGULAR, SEAT_VIP, Hall, Movie, Session
from repositories.hall_repo import HallRepo
from repositories.movie_repo import MovieRepo
from repositories.seat_repo import SeatRepo
from repositories.session_repo import SessionRepo
from services.user_service import UserService

PASSWORD = "Valid123!"


@pytest.fixture()
def client(tmp_path):
    app.config.update(
        TESTING=True,
        POSTERS_DIR=str(tmp_path / "posters"),
    )
    with app.app_context():
        db.drop_all()
        db.create_all()
        yield app.test_client()
        db.session.remove()
        db.drop_all()


def make_user(email, role=ROLE_CUSTOMER, name="", password=PASSWORD):
    return UserService().ensure_user_with_role(email, password, name or email, role)


def bearer(user):
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture()
def customer(client):
    return make_user("alice@example.com", ROLE_CUSTOMER, name="Alice")


@pytest.fixture()
def admin(client):
    return make_user("admin@example.com", ROLE_ADMIN, name="Admin")


@pytest.fixture()
def cashier(client):
    return make_user("cashier@example.com", ROLE_CASHIER, name="Cashier")


class Catalog:
    """Ids of a small seeded catalog.

    The main hall has 4 rows of 3 seats: rows 1-2 regular, rows 3-4 VIP.
    """

    def __init__(self, movie, hall, other_hall, session):
        seat_repo = SeatRepo()
        self.movie_id = movie.id
        self.hall_id = hall.id
        self.other_hall_id = other_hall.id
        self.session_id = session.id
        self.session_price = session.price
        seats = seat_repo.get_by_hall_id(hall.id)
        self.regular = [seat.id for seat in seats if seat.seat_type == SEAT_REGULAR]
        self.vip = [seat.id for seat in seats if seat.seat_type == SEAT_VIP]
        self.other_hall_seats = [seat.id for seat in seat_repo.get_by_hall_id(other_hall.id)]


@pytest.fixture()
def catalog(client):
    seat_repo = SeatRepo()
    hall = HallRepo().create(Hall(name="Main", capacity=12, rows=4, seats_per_row=3))
    other_hall = HallRepo().create(Hall(name="Small", capacity=2, rows=1, seats_per_row=2))
    seat_repo.ensure_seats_for_hall(hall)
    seat_repo.ensure_seats_for_hall(other_hall)
    movie = MovieRepo().create(Movie(title="Arrival", duration=116, genre="Sci-Fi", rating=7.9))
    session = SessionRepo().create(
        Session(movie_id=movie.id, hall_id=hall.id, start_time=datetime(2026, 3, 1, 19, 0), price=1800)
    )
    return Catalog(movie, hall, other_hall, session)
