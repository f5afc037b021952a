from datetime import timezone

from models import Hall, Session
from repositories.booking_repo import BookingRepo
from repositories.hall_repo import HallRepo
from repositories.movie_repo import MovieRepo
from repositories.seat_repo import SeatRepo
from repositories.session_repo import SessionRepo
from services.errors import BadRequestError, NotFoundError


def to_naive_utc(value):
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class SessionService:

    def __init__(self, session_repo=None, hall_repo=None, seat_repo=None,
                 booking_repo=None, movie_repo=None):
        self.session_repo = session_repo or SessionRepo()
        self.hall_repo = hall_repo or HallRepo()
        self.seat_repo = seat_repo or SeatRepo()
        self.booking_repo = booking_repo or BookingRepo()
        self.movie_repo = movie_repo or MovieRepo()

    def get_by_id(self, session_id):
        return self.session_repo.get_by_id(session_id)

    def get_all(self):
        return self.session_repo.get_all()

    def get_by_movie_id(self, movie_id):
        return self.session_repo.get_by_movie_id(movie_id)

    def _check_references(self, movie_id, hall_id):
        if self.movie_repo.get_by_id(movie_id) is None:
            raise BadRequestError("movie not found")
        if self.hall_repo.get_by_id(hall_id) is None:
            raise BadRequestError("hall not found")

    def create(self, data):
        self._check_references(data["movie_id"], data["hall_id"])
        session = Session(
            movie_id=data["movie_id"],
            hall_id=data["hall_id"],
            start_time=to_naive_utc(data["start_time"]),
            price=data["price"],
        )
        return self.session_repo.create(session)

    def update(self, session_id, data):
        session = self.session_repo.get_by_id(session_id)
        if session is None:
            raise NotFoundError("session not found")
        self._check_references(data["movie_id"], data["hall_id"])
        session.movie_id = data["movie_id"]
        session.hall_id = data["hall_id"]
        session.start_time = to_naive_utc(data["start_time"])
        session.price = data["price"]
        return self.session_repo.update(session)

    def get_available_seats(self, session_id):
        """Return the hall's seats for a session and the ids already booked."""
        session = self.session_repo.get_by_id(session_id)
        if session is None:
            raise NotFoundError("session not found")
        hall = self.hall_repo.get_by_id(session.hall_id)
        if hall is None:
            raise NotFoundError("hall not found")

        self.seat_repo.ensure_seats_for_hall(hall)
        seats = self.seat_repo.get_by_hall_id(hall.id)
        booked = self.booking_repo.booked_seat_ids_for_session(session_id)
        return seats, booked


class HallService:

    def __init__(self, hall_repo=None, seat_repo=None):
        self.hall_repo = hall_repo or HallRepo()
        self.seat_repo = seat_repo or SeatRepo()

    def get_all(self):
        return self.hall_repo.get_all()

    def create(self, data):
        rows = data["rows"]
        seats_per_row = data["seats_per_row"]
        hall = Hall(
            name=data["name"],
            rows=rows,
            seats_per_row=seats_per_row,
            capacity=data.get("capacity") or rows * seats_per_row,
        )
        self.hall_repo.create(hall)
        self.seat_repo.ensure_seats_for_hall(hall)
        return hall
