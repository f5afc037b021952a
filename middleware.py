from functools import wraps

from flask import g
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, verify_jwt_in_request

from services.errors import ForbiddenError, UnauthorizedError


def issue_token(user):
    """Sign a token whose subject is the user id and which carries the role."""
    return create_access_token(identity=str(user.id), additional_claims={"role": user.role})


def _load_identity():
    verify_jwt_in_request()
    try:
        g.user_id = int(get_jwt_identity())
    except (TypeError, ValueError):
        raise UnauthorizedError("invalid token sub")
    g.role = get_jwt().get("role") or ""


def auth_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        _load_identity()
        return fn(*args, **kwargs)

    return wrapper


def roles_required(*roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            _load_identity()
            if g.role not in roles:
                raise ForbiddenError("forbidden")
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def has_role(*roles):
    return g.get("role") in roles
