import logging
from datetime import datetime

from models import ROLE_ADMIN, ROLE_CASHIER, ROLE_CUSTOMER, Hall, Movie, Session
from repositories.hall_repo import HallRepo
from repositories.movie_repo import MovieRepo
from repositories.seat_repo import SeatRepo
from repositories.session_repo import SessionRepo
from services.user_service import UserService

logger = logging.getLogger(__name__)

seed_halls = [
    {"name": "Hall 1", "capacity": 96, "rows": 8, "seats_per_row": 12},
    {"name": "Hall 2", "capacity": 64, "rows": 8, "seats_per_row": 8},
    {"name": "Hall 3", "capacity": 120, "rows": 10, "seats_per_row": 12},
    {"name": "VIP Hall", "capacity": 24, "rows": 4, "seats_per_row": 6},
]

seed_movies = [
    {
        "title": "Inception",
        "description": "A thief who steals corporate secrets through dream-sharing technology.",
        "duration": 148,
        "genre": "Sci-Fi",
        "rating": 8.8,
    },
    {
        "title": "The Dark Knight",
        "description": "Batman faces the Joker in Gotham City.",
        "duration": 152,
        "genre": "Action",
        "rating": 9.0,
    },
    {
        "title": "Interstellar",
        "description": "Explorers travel through a wormhole in space to ensure humanity's survival.",
        "duration": 169,
        "genre": "Sci-Fi",
        "rating": 8.6,
    },
]

# (movie index, hall index, start time in UTC, base price)
seed_sessions = [
    (0, 0, "2026-02-15T11:00:00", 2500),
    (0, 1, "2026-02-15T14:30:00", 2500),
    (1, 0, "2026-02-15T16:00:00", 2200),
    (1, 2, "2026-02-15T19:00:00", 2200),
    (2, 1, "2026-02-15T12:00:00", 2500),
    (2, 0, "2026-02-15T21:00:00", 1900),
]


def seed_default_users(config):
    """Create the admin, cashier and customer accounts if they are missing."""
    user_service = UserService()
    accounts = [
        ("DEFAULT_ADMIN", "Admin", ROLE_ADMIN),
        ("DEFAULT_CASHIER", "Cashier", ROLE_CASHIER),
        ("DEFAULT_CUSTOMER", "Guest", ROLE_CUSTOMER),
    ]
    created = 0
    for prefix, name, role in accounts:
        user = user_service.ensure_user_with_role(
            config.get(f"{prefix}_EMAIL"),
            config.get(f"{prefix}_PASSWORD"),
            name,
            role,
        )
        if user is not None:
            created += 1
    return created


def seed_catalog():
    """Seed demo halls, movies and sessions into an empty database.

    Every hall gets its seat grid, and existing grids are brought in line
    with the VIP row rule.
    """
    hall_repo = HallRepo()
    seat_repo = SeatRepo()
    movie_repo = MovieRepo()
    session_repo = SessionRepo()

    if hall_repo.count() == 0:
        for data in seed_halls:
            hall_repo.create(Hall(**data))
        logger.info("Seeded %d halls", len(seed_halls))

    halls = hall_repo.get_all()
    for hall in halls:
        seat_repo.ensure_seats_for_hall(hall)
        seat_repo.fix_vip_seats_for_hall(hall)

    if movie_repo.count() == 0:
        for data in seed_movies:
            movie_repo.create(Movie(**data))
        logger.info("Seeded %d movies", len(seed_movies))

    movies = movie_repo.get_all()
    if session_repo.count() == 0 and len(movies) >= len(seed_movies) and len(halls) >= len(seed_halls):
        for movie_index, hall_index, start_time, price in seed_sessions:
            session_repo.create(
                Session(
                    movie_id=movies[movie_index].id,
                    hall_id=halls[hall_index].id,
                    start_time=datetime.fromisoformat(start_time),
                    price=price,
                )
            )
        logger.info("Seeded %d sessions", len(seed_sessions))


def seed_all(config):
    seed_default_users(config)
    seed_catalog()


if __name__ == "__main__":
    from app import app

    with app.app_context():
        seed_all(app.config)
        print("Seeding complete!")
