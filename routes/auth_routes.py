from flask import Blueprint, jsonify, request
from flask_jwt_extended import set_access_cookies, unset_jwt_cookies

from middleware import issue_token
from schemas import login_schema, register_schema, user_schema
from services.user_service import UserService

auth_bp = Blueprint("auth", __name__)

user_service = UserService()


def _auth_response(user, status_code=200):
    token = issue_token(user)
    response = jsonify({"user": user_schema.dump(user), "token": token})
    response.status_code = status_code
    set_access_cookies(response, token)
    return response


@auth_bp.route("/api/auth/register", methods=["POST"])
def register():
    # Registration always creates a customer; any submitted role is ignored
    payload = register_schema.load(request.get_json(silent=True) or {})
    user = user_service.register_customer(payload["name"], payload["email"], payload["password"])
    return _auth_response(user, 201)


@auth_bp.route("/api/auth/login", methods=["POST"])
def login():
    payload = login_schema.load(request.get_json(silent=True) or {})
    user = user_service.authenticate(payload["email"], payload["password"])
    return _auth_response(user)


@auth_bp.route("/api/auth/logout", methods=["POST"])
def logout():
    response = jsonify({"message": "Logged out"})
    unset_jwt_cookies(response)
    return response
