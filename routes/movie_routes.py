from flask import Blueprint, jsonify, request

from middleware import roles_required
from models import ROLE_ADMIN
from schemas import movie_schema, movies_schema
from services.errors import NotFoundError
from services.movie_service import MovieService

movie_bp = Blueprint("movie_api", __name__)

movie_service = MovieService()


@movie_bp.route("/api/movies", methods=["GET"])
def list_movies():
    return jsonify(movies_schema.dump(movie_service.get_all()))


@movie_bp.route("/api/movies/<int:movie_id>", methods=["GET"])
def get_movie(movie_id):
    movie = movie_service.get_by_id(movie_id)
    if movie is None:
        raise NotFoundError("not found")
    return jsonify(movie_schema.dump(movie))


@movie_bp.route("/api/movies", methods=["POST"])
@roles_required(ROLE_ADMIN)
def create_movie():
    payload = movie_schema.load(request.get_json(silent=True) or {})
    movie = movie_service.create(payload)
    return jsonify(movie_schema.dump(movie)), 201


@movie_bp.route("/api/movies/<int:movie_id>", methods=["PUT"])
@roles_required(ROLE_ADMIN)
def update_movie(movie_id):
    payload = movie_schema.load(request.get_json(silent=True) or {})
    movie = movie_service.update(movie_id, payload)
    return jsonify(movie_schema.dump(movie))


@movie_bp.route("/api/movies/<int:movie_id>", methods=["DELETE"])
@roles_required(ROLE_ADMIN)
def delete_movie(movie_id):
    movie_service.delete(movie_id)
    return "", 204
