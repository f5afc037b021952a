from flask import Blueprint, g, jsonify, request

from middleware import auth_required, has_role, roles_required
from models import ROLE_ADMIN, ROLE_CASHIER
from repositories.user_repo import UserRepo
from schemas import booking_create_schema, booking_schema, change_seats_schema
from services.booking_service import BookingService
from services.errors import ForbiddenError, NotFoundError

booking_bp = Blueprint("booking_api", __name__)

booking_service = BookingService()
user_repo = UserRepo()


def _with_user_names(bookings):
    names = {}
    payload = []
    for booking in bookings:
        if booking.user_id not in names:
            user = user_repo.get_by_id(booking.user_id)
            names[booking.user_id] = user.name if user else ""
        item = booking_schema.dump(booking)
        item["userName"] = names[booking.user_id]
        payload.append(item)
    return payload


def _get_visible_booking(booking_id):
    booking = booking_service.get_by_id(booking_id)
    if booking is None:
        raise NotFoundError("not found")
    # Staff can see every booking, customers only their own
    if booking.user_id != g.user_id and not has_role(ROLE_ADMIN, ROLE_CASHIER):
        raise ForbiddenError("forbidden")
    return booking


@booking_bp.route("/api/bookings", methods=["GET"])
@auth_required
def list_bookings():
    if request.args.get("all") == "1" and has_role(ROLE_ADMIN, ROLE_CASHIER):
        bookings = booking_service.get_all()
    else:
        bookings = booking_service.get_by_user_id(g.user_id)
    return jsonify(_with_user_names(bookings))


@booking_bp.route("/api/bookings", methods=["POST"])
@auth_required
def create_booking():
    if has_role(ROLE_ADMIN):
        raise ForbiddenError("admin cannot create bookings")

    payload = booking_create_schema.load(request.get_json(silent=True) or {})
    booking = booking_service.create(
        g.user_id,
        payload["session_id"],
        payload["seat_ids"],
        payload["ticket_types"],
    )
    return jsonify(booking_schema.dump(booking)), 201


@booking_bp.route("/api/bookings/<int:booking_id>", methods=["GET"])
@auth_required
def get_booking(booking_id):
    return jsonify(booking_schema.dump(_get_visible_booking(booking_id)))


@booking_bp.route("/api/bookings/<int:booking_id>", methods=["DELETE"])
@auth_required
def cancel_booking(booking_id):
    _get_visible_booking(booking_id)
    booking_service.cancel(booking_id)
    return "", 204


@booking_bp.route("/api/bookings/<int:booking_id>", methods=["PATCH"])
@roles_required(ROLE_ADMIN, ROLE_CASHIER)
def change_seats(booking_id):
    payload = change_seats_schema.load(request.get_json(silent=True) or {})
    booking = booking_service.change_seats(booking_id, payload["seat_ids"])
    return jsonify(booking_schema.dump(booking))
