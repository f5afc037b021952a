from models import User, db
from repositories.base import commit, remove, save


class UserRepo:

    def create(self, user):
        return save(user)

    def get_by_id(self, user_id):
        return db.session.get(User, user_id)

    def get_by_email(self, email):
        return User.query.filter_by(email=email).first()

    def get_all(self):
        return User.query.order_by(User.id.asc()).all()

    def update(self, user):
        commit()
        return user

    def delete(self, user_id):
        user = self.get_by_id(user_id)
        if user is None:
            return False
        remove(user)
        return True

    def count_by_role(self, role):
        return User.query.filter_by(role=role).count()
