import re
from typing import Any, Dict

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validates, validate

from models import MAX_ID

ID_RANGE = validate.Range(min=1, max=MAX_ID)


def check_password_strength(value: str):
    if len(value) < 8:
        raise ValidationError("Password must be at least 8 characters")
    if not re.search(r"\d", value):
        raise ValidationError("Password must have a number")
    if not re.search(r"[^A-Za-z0-9]", value):
        raise ValidationError("Password must have at least 1 special character")


def validation_errors(exc: ValidationError):
    """Flatten marshmallow messages into [{"field", "msg"}] pairs."""
    errors = []
    messages = exc.messages if isinstance(exc.messages, dict) else {"_schema": exc.messages}
    for field, field_messages in messages.items():
        if isinstance(field_messages, dict):
            # List fields report errors per index
            for index, nested in field_messages.items():
                for message in nested:
                    errors.append({"field": f"{field}.{index}", "msg": message})
            continue
        for message in field_messages:
            errors.append({"field": field, "msg": message})
    return errors


class RequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE


# ---------------------------------------------------------------------------
# Auth and profile
# ---------------------------------------------------------------------------

class RegisterSchema(RequestSchema):
    name = fields.Str(load_default="")
    email = fields.Email(required=True)
    password = fields.Str(required=True)

    @pre_load
    def strip_strings(self, data: Dict[str, Any], **kwargs):
        for key in ("name", "email"):
            value = data.get(key)
            if isinstance(value, str):
                data[key] = value.strip()
        return data

    @validates("password")
    def validate_password(self, value: str, **kwargs):
        check_password_strength(value)


class LoginSchema(RequestSchema):
    email = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, validate=validate.Length(min=1))


class ProfileUpdateSchema(RequestSchema):
    name = fields.Str(load_default="")
    email = fields.Str(load_default="")
    avatar_url = fields.Str(data_key="avatarUrl", load_default="")
    current_password = fields.Str(data_key="currentPassword", load_default="")
    new_password = fields.Str(data_key="newPassword", load_default="")

    @validates("email")
    def validate_email(self, value: str, **kwargs):
        if value:
            validate.Email()(value)

    @validates("new_password")
    def validate_new_password(self, value: str, **kwargs):
        if value:
            check_password_strength(value)


class UserSchema(Schema):
    id = fields.Int(dump_only=True)
    email = fields.Str()
    name = fields.Str()
    role = fields.Str()
    avatar_url = fields.Str(data_key="avatarUrl")


class ClientSchema(Schema):
    id = fields.Int()
    name = fields.Str()
    email = fields.Str()
    role = fields.Str()


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class MovieSchema(RequestSchema):
    id = fields.Int(dump_only=True)
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    description = fields.Str(load_default="")
    duration = fields.Int(load_default=0, validate=validate.Range(min=0))
    genre = fields.Str(load_default="")
    rating = fields.Float(load_default=0.0, validate=validate.Range(min=0, max=10))
    poster_url = fields.Str(data_key="posterUrl", load_default="")


class HallSchema(RequestSchema):
    id = fields.Int(dump_only=True)
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    capacity = fields.Int(load_default=None, validate=validate.Range(min=0))
    rows = fields.Int(required=True, validate=validate.Range(min=1))
    seats_per_row = fields.Int(data_key="seatsPerRow", required=True, validate=validate.Range(min=1))


class SeatSchema(Schema):
    id = fields.Int()
    hall_id = fields.Int(data_key="hallId")
    row_number = fields.Int(data_key="rowNumber")
    seat_number = fields.Int(data_key="seatNumber")
    seat_type = fields.Str(data_key="seatType")


class SessionSchema(RequestSchema):
    id = fields.Int(dump_only=True)
    movie_id = fields.Int(data_key="movieId", required=True, validate=ID_RANGE)
    hall_id = fields.Int(data_key="hallId", required=True, validate=ID_RANGE)
    start_time = fields.DateTime(data_key="startTime", required=True)
    price = fields.Float(required=True, validate=validate.Range(min=0))


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------

class TicketSchema(Schema):
    id = fields.Int()
    booking_id = fields.Int(data_key="bookingId")
    seat_id = fields.Int(data_key="seatId")
    price = fields.Float()


class BookingSchema(Schema):
    id = fields.Int()
    user_id = fields.Int(data_key="userId")
    session_id = fields.Int(data_key="sessionId")
    status = fields.Str()
    total_price = fields.Float(data_key="totalPrice")
    created_at = fields.DateTime(data_key="createdAt")
    tickets = fields.List(fields.Nested(TicketSchema))


class BookingCreateSchema(RequestSchema):
    session_id = fields.Int(data_key="sessionId", required=True, validate=ID_RANGE)
    seat_ids = fields.List(fields.Int(validate=ID_RANGE), data_key="seatIds", load_default=list)
    ticket_types = fields.List(fields.Str(), data_key="ticketTypes", load_default=None)


class ChangeSeatsSchema(RequestSchema):
    seat_ids = fields.List(fields.Int(validate=ID_RANGE), data_key="seatIds", load_default=list)


register_schema = RegisterSchema()
login_schema = LoginSchema()
profile_update_schema = ProfileUpdateSchema()
user_schema = UserSchema()
client_schema = ClientSchema()
movie_schema = MovieSchema()
movies_schema = MovieSchema(many=True)
hall_schema = HallSchema()
halls_schema = HallSchema(many=True)
seat_schema = SeatSchema()
session_schema = SessionSchema()
sessions_schema = SessionSchema(many=True)
booking_schema = BookingSchema()
bookings_schema = BookingSchema(many=True)
booking_create_schema = BookingCreateSchema()
change_seats_schema = ChangeSeatsSchema()
