import logging
import os
import re

from flask import Blueprint, current_app, jsonify, request, send_from_directory

from middleware import roles_required
from models import ROLE_ADMIN
from services.errors import BadRequestError

poster_bp = Blueprint("poster_api", __name__)

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def poster_filename(upload_name):
    """Reduce an uploaded file name to [A-Za-z0-9_-] plus its extension."""
    # ".png" is an extension with an empty base, not a base with no extension
    base, dot, ext = os.path.basename(upload_name or "").rpartition(".")
    ext = dot + ext.lower()
    if not dot or ext not in ALLOWED_EXTENSIONS:
        raise BadRequestError("allowed: jpg, png, gif, webp")
    safe = re.sub(r"[^A-Za-z0-9_-]", "", base) or "poster"
    return safe + ext


def posters_dir():
    return os.path.abspath(current_app.config["POSTERS_DIR"])


@poster_bp.route("/api/upload-poster", methods=["POST"])
@roles_required(ROLE_ADMIN)
def upload_poster():
    upload = request.files.get("poster")
    if upload is None:
        raise BadRequestError("missing file field 'poster'")

    name = poster_filename(upload.filename)
    target_dir = posters_dir()
    os.makedirs(target_dir, exist_ok=True)
    upload.save(os.path.join(target_dir, name))
    logger.info("Saved poster %s", name)
    return jsonify({"url": f"/posters/{name}"})


@poster_bp.route("/posters/<path:filename>", methods=["GET"])
def serve_poster(filename):
    return send_from_directory(posters_dir(), filename)
