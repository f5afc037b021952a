import logging
import os

import bcrypt
from dotenv import load_dotenv

from models import ROLE_ADMIN, ROLE_CUSTOMER, User
from repositories.booking_repo import BookingRepo
from repositories.user_repo import UserRepo
from services.errors import BadRequestError, ConflictError, NotFoundError, UnauthorizedError

load_dotenv()

logger = logging.getLogger(__name__)

pepper_value = os.getenv("PEPPER")
if pepper_value is None:
    raise RuntimeError("PEPPER environment variable is not set.")
PEPPER = pepper_value.encode('utf-8')


def hash_password(password):
    password_with_pepper = password.encode('utf-8') + PEPPER
    return bcrypt.hashpw(password_with_pepper, bcrypt.gensalt())


def verify_password(entered_password, stored_hashed_password):
    if not entered_password or not stored_hashed_password:
        return False
    entered_password_with_pepper = entered_password.encode('utf-8') + PEPPER
    try:
        return bcrypt.checkpw(entered_password_with_pepper, stored_hashed_password)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class UserService:

    def __init__(self, repo=None, booking_repo=None):
        self.repo = repo or UserRepo()
        self.booking_repo = booking_repo or BookingRepo()

    def ensure_user_with_role(self, email, password, name, role):
        """Create a user with the given role unless the email is taken.

        Returns the new user, or None when nothing was created.
        """
        if not email or not password:
            return None
        if self.repo.get_by_email(email) is not None:
            return None

        user = User(email=email, password_hash=hash_password(password), name=name, role=role)
        self.repo.create(user)
        logger.info("Created default %s account %s", role, email)
        return user

    def ensure_default_admin(self, email, password, name):
        return self.ensure_user_with_role(email, password, name, ROLE_ADMIN)

    def register_customer(self, name, email, password):
        if self.repo.get_by_email(email) is not None:
            raise ConflictError("email already in use")

        user = User(
            email=email,
            password_hash=hash_password(password),
            name=name or "",
            role=ROLE_CUSTOMER,
        )
        self.repo.create(user)
        logger.info("Registered customer %s (id=%s)", email, user.id)
        return user

    def authenticate(self, email, password):
        user = self.repo.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", email)
            raise UnauthorizedError("invalid credentials")
        return user

    def get_by_id(self, user_id):
        return self.repo.get_by_id(user_id)

    def get_all(self):
        return self.repo.get_all()

    def update_profile(self, user_id, name="", email="", avatar_url="",
                       current_password="", new_password=""):
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found")

        if email and email != user.email:
            existing = self.repo.get_by_email(email)
            if existing is not None and existing.id != user.id:
                raise ConflictError("email already in use")

        if new_password:
            if not current_password:
                raise BadRequestError("current password is required to set a new password")
            if not verify_password(current_password, user.password_hash):
                raise BadRequestError("current password is incorrect")

        if name:
            user.name = name
        if email:
            user.email = email
        if avatar_url:
            user.avatar_url = avatar_url
        if new_password:
            user.password_hash = hash_password(new_password)

        return self.repo.update(user)

    def get_client_details(self, user_id):
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user, self.booking_repo.get_by_user_id(user_id)

    def delete_user(self, user_id):
        """Delete a user and every booking they made; returns the booking count."""
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found")
        deleted_bookings = self.booking_repo.delete_by_user_id(user_id)
        self.repo.delete(user_id)
        logger.info("Deleted user %s with %d booking(s)", user_id, deleted_bookings)
        return deleted_bookings
