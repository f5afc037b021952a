from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

ROLE_CUSTOMER = "customer"
ROLE_CASHIER = "cashier"
ROLE_ADMIN = "admin"

SEAT_REGULAR = "regular"
SEAT_VIP = "vip"

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"

# Bookings in these states hold their seats
ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)

# Largest id a SQLite INTEGER column can hold
MAX_ID = 2**63 - 1


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.LargeBinary, nullable=False)
    name = db.Column(db.String(100), nullable=False, default='')
    role = db.Column(db.String(20), nullable=False, default=ROLE_CUSTOMER)
    avatar_url = db.Column(db.String(300), nullable=False, default='')


class Movie(db.Model):
    __tablename__ = 'movies'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    duration = db.Column(db.Integer, nullable=False, default=0)
    genre = db.Column(db.String(100), nullable=False, default='')
    rating = db.Column(db.Float, nullable=False, default=0.0)
    poster_url = db.Column(db.String(300), nullable=False, default='')


class Hall(db.Model):
    __tablename__ = 'halls'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    capacity = db.Column(db.Integer, nullable=False, default=0)
    rows = db.Column(db.Integer, nullable=False, default=0)
    seats_per_row = db.Column(db.Integer, nullable=False, default=0)


class Seat(db.Model):
    __tablename__ = 'seats'
    id = db.Column(db.Integer, primary_key=True)
    hall_id = db.Column(db.Integer, db.ForeignKey('halls.id'), nullable=False, index=True)
    row_number = db.Column(db.Integer, nullable=False)
    seat_number = db.Column(db.Integer, nullable=False)
    seat_type = db.Column(db.String(20), nullable=False, default=SEAT_REGULAR)


class Session(db.Model):
    """A scheduled screening of a movie in a hall."""
    __tablename__ = 'sessions'
    id = db.Column(db.Integer, primary_key=True)
    movie_id = db.Column(db.Integer, db.ForeignKey('movies.id'), nullable=False, index=True)
    hall_id = db.Column(db.Integer, db.ForeignKey('halls.id'), nullable=False, index=True)
    start_time = db.Column(db.DateTime, nullable=False)
    price = db.Column(db.Float, nullable=False, default=0.0)


class Booking(db.Model):
    __tablename__ = 'bookings'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    session_id = db.Column(db.Integer, db.ForeignKey('sessions.id'), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_CONFIRMED)
    total_price = db.Column(db.Float, nullable=False, default=0.0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    tickets = db.relationship(
        'Ticket',
        backref='booking',
        cascade='all, delete-orphan',
        order_by='Ticket.id',
    )


class Ticket(db.Model):
    __tablename__ = 'tickets'
    id = db.Column(db.Integer, primary_key=True)
    booking_id = db.Column(db.Integer, db.ForeignKey('bookings.id'), nullable=False, index=True)
    seat_id = db.Column(db.Integer, db.ForeignKey('seats.id'), nullable=False)
    price = db.Column(db.Float, nullable=False)
