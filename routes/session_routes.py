from flask import Blueprint, jsonify, request

from middleware import roles_required
from models import MAX_ID, ROLE_ADMIN
from schemas import halls_schema, hall_schema, seat_schema, session_schema, sessions_schema
from services.errors import BadRequestError, NotFoundError
from services.session_service import HallService, SessionService

session_bp = Blueprint("session_api", __name__)

session_service = SessionService()
hall_service = HallService()


@session_bp.route("/api/sessions", methods=["GET"])
def list_sessions():
    movie_id_raw = request.args.get("movieId")
    if movie_id_raw:
        try:
            movie_id = int(movie_id_raw)
        except ValueError:
            raise BadRequestError("invalid movieId")
        if not 0 < movie_id <= MAX_ID:
            raise BadRequestError("invalid movieId")
        sessions = session_service.get_by_movie_id(movie_id)
    else:
        sessions = session_service.get_all()
    return jsonify(sessions_schema.dump(sessions))


@session_bp.route("/api/sessions/<int:session_id>", methods=["GET"])
def get_session(session_id):
    session = session_service.get_by_id(session_id)
    if session is None:
        raise NotFoundError("not found")
    return jsonify(session_schema.dump(session))


@session_bp.route("/api/sessions/<int:session_id>/seats", methods=["GET"])
def session_seats(session_id):
    seats, booked_ids = session_service.get_available_seats(session_id)
    booked = set(booked_ids)
    payload = []
    for seat in seats:
        item = seat_schema.dump(seat)
        item["booked"] = seat.id in booked
        payload.append(item)
    return jsonify(payload)


@session_bp.route("/api/sessions", methods=["POST"])
@roles_required(ROLE_ADMIN)
def create_session():
    payload = session_schema.load(request.get_json(silent=True) or {})
    session = session_service.create(payload)
    return jsonify(session_schema.dump(session)), 201


@session_bp.route("/api/sessions/<int:session_id>", methods=["PUT"])
@roles_required(ROLE_ADMIN)
def update_session(session_id):
    payload = session_schema.load(request.get_json(silent=True) or {})
    session = session_service.update(session_id, payload)
    return jsonify(session_schema.dump(session))


@session_bp.route("/api/halls", methods=["GET"])
def list_halls():
    return jsonify(halls_schema.dump(hall_service.get_all()))


@session_bp.route("/api/halls", methods=["POST"])
@roles_required(ROLE_ADMIN)
def create_hall():
    payload = hall_schema.load(request.get_json(silent=True) or {})
    hall = hall_service.create(payload)
    return jsonify(hall_schema.dump(hall)), 201
