from flask import Blueprint, g, jsonify, request

from middleware import auth_required, roles_required
from models import ROLE_ADMIN, ROLE_CASHIER
from schemas import bookings_schema, client_schema, profile_update_schema, user_schema
from services.errors import NotFoundError
from services.user_service import UserService

user_bp = Blueprint("user_api", __name__)

user_service = UserService()


@user_bp.route("/api/me", methods=["GET"])
@auth_required
def get_profile():
    user = user_service.get_by_id(g.user_id)
    if user is None:
        raise NotFoundError("user not found")
    return jsonify(user_schema.dump(user))


@user_bp.route("/api/me", methods=["PUT"])
@auth_required
def update_profile():
    payload = profile_update_schema.load(request.get_json(silent=True) or {})
    user = user_service.update_profile(g.user_id, **payload)
    return jsonify(user_schema.dump(user))


@user_bp.route("/api/users", methods=["GET"])
@roles_required(ROLE_ADMIN)
def list_users():
    return jsonify({"users": user_schema.dump(user_service.get_all(), many=True)})


@user_bp.route("/api/users/<int:user_id>", methods=["GET"])
@roles_required(ROLE_ADMIN, ROLE_CASHIER)
def get_client(user_id):
    user, bookings = user_service.get_client_details(user_id)
    return jsonify({"user": client_schema.dump(user), "lastBookings": bookings_schema.dump(bookings)})


@user_bp.route("/api/users/<int:user_id>", methods=["DELETE"])
@roles_required(ROLE_ADMIN)
def delete_user(user_id):
    deleted_bookings = user_service.delete_user(user_id)
    return jsonify(
        {
            "message": "User deleted successfully",
            "userId": user_id,
            "deletedBookings": deleted_bookings,
        }
    )
