import logging
import logging.config
import os
import threading
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_jwt_extended import JWTManager
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from werkzeug.routing import IntegerConverter

from models import MAX_ID, db
from routes.auth_routes import auth_bp
from routes.booking_routes import booking_bp
from routes.movie_routes import movie_bp
from routes.poster_routes import poster_bp
from routes.session_routes import session_bp
from routes.user_routes import user_bp
from schemas import validation_errors
from seed import seed_all
from services.errors import ServiceError

load_dotenv()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '[{levelname}] {asctime} | {name} | {funcName}:{lineno:d} | {message}',
            'style': '{',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
            'stream': 'ext://sys.stdout',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': os.getenv("LOG_LEVEL", "INFO"),
    },
}

logging.config.dictConfig(LOGGING)
logger = logging.getLogger(__name__)

jwt_secret = os.getenv("JWT_SECRET_KEY")
if not jwt_secret:
    raise RuntimeError("JWT_SECRET_KEY environment variable is not set.")

app = Flask(__name__)
app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL", "sqlite:///cinema.db")
app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
app.config['SECRET_KEY'] = os.getenv("SECRET_KEY", jwt_secret)
app.config["JWT_SECRET_KEY"] = jwt_secret
app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(hours=int(os.getenv("JWT_EXPIRES_HOURS", "24")))
app.config["JWT_TOKEN_LOCATION"] = ["headers", "cookies"]
app.config["JWT_COOKIE_SECURE"] = False
app.config["JWT_COOKIE_CSRF_PROTECT"] = False
app.config["MAX_CONTENT_LENGTH"] = 10 * 1024 * 1024
app.config["POSTERS_DIR"] = os.getenv("POSTERS_DIR", os.path.join("web", "posters"))
app.config["HEARTBEAT_INTERVAL"] = float(os.getenv("HEARTBEAT_INTERVAL", "30"))
app.config["SEED_ON_STARTUP"] = os.getenv("SEED_ON_STARTUP", "1") == "1"
app.config["DEFAULT_ADMIN_EMAIL"] = os.getenv("DEFAULT_ADMIN_EMAIL", "admin")
app.config["DEFAULT_ADMIN_PASSWORD"] = os.getenv("DEFAULT_ADMIN_PASSWORD", "1234")
app.config["DEFAULT_CASHIER_EMAIL"] = os.getenv("DEFAULT_CASHIER_EMAIL", "cashier")
app.config["DEFAULT_CASHIER_PASSWORD"] = os.getenv("DEFAULT_CASHIER_PASSWORD", "1234")
app.config["DEFAULT_CUSTOMER_EMAIL"] = os.getenv("DEFAULT_CUSTOMER_EMAIL", "customer")
app.config["DEFAULT_CUSTOMER_PASSWORD"] = os.getenv("DEFAULT_CUSTOMER_PASSWORD", "1234")

db.init_app(app)


class IdConverter(IntegerConverter):
    """`<int:...>` segments past the range of a stored id do not match, so they 404."""

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault("max", MAX_ID)
        super().__init__(map, *args, **kwargs)


app.url_map.converters["int"] = IdConverter

jwt = JWTManager(app)
app.register_blueprint(auth_bp)
app.register_blueprint(movie_bp)
app.register_blueprint(session_bp)
app.register_blueprint(booking_bp)
app.register_blueprint(user_bp)
app.register_blueprint(poster_bp)


@jwt.unauthorized_loader
def missing_token(reason):
    return jsonify({"message": "missing or invalid Authorization header"}), 401


@jwt.invalid_token_loader
def invalid_token(reason):
    return jsonify({"message": "invalid token"}), 401


@jwt.expired_token_loader
def expired_token(jwt_header, jwt_payload):
    return jsonify({"message": "token expired"}), 401


@app.errorhandler(ServiceError)
def handle_service_error(exc):
    if exc.status_code >= 500:
        logger.exception("Service error: %s", exc.message)
    return jsonify({"message": exc.message}), exc.status_code


@app.errorhandler(ValidationError)
def handle_validation_error(exc):
    return jsonify({"message": "Invalid input", "errors": validation_errors(exc)}), 400


@app.errorhandler(HTTPException)
def handle_http_error(exc):
    return jsonify({"message": exc.description}), exc.code


@app.errorhandler(Exception)
def handle_unexpected_error(exc):
    db.session.rollback()
    logger.exception("Unhandled exception: %s", exc)
    return jsonify({"message": "Internal server error"}), 500


@app.route("/health")
def health():
    return jsonify({"status": "ok"})


def start_heartbeat(interval, stop_event=None):
    """Log a heartbeat line every `interval` seconds until `stop_event` is set."""
    stop_event = stop_event or threading.Event()

    def beat():
        while not stop_event.wait(interval):
            logger.info("[background] cinema system running")

    thread = threading.Thread(target=beat, name="heartbeat", daemon=True)
    thread.start()
    return thread, stop_event


with app.app_context():
    db.create_all()
    if app.config["SEED_ON_STARTUP"]:
        seed_all(app.config)


if __name__ == '__main__':
    start_heartbeat(app.config["HEARTBEAT_INTERVAL"])
    logger.info("Cinema system listening on http://localhost:8080")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "8080")))
