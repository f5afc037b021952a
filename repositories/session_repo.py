from models import Session, db
from repositories.base import commit, remove, save


class SessionRepo:

    def create(self, session):
        return save(session)

    def get_by_id(self, session_id):
        return db.session.get(Session, session_id)

    def get_all(self):
        return Session.query.order_by(Session.id.asc()).all()

    def get_by_movie_id(self, movie_id):
        return (
            Session.query.filter_by(movie_id=movie_id)
            .order_by(Session.start_time.asc())
            .all()
        )

    def get_by_hall_id(self, hall_id):
        return (
            Session.query.filter_by(hall_id=hall_id)
            .order_by(Session.start_time.asc())
            .all()
        )

    def update(self, session):
        commit()
        return session

    def delete(self, session_id):
        session = self.get_by_id(session_id)
        if session is None:
            return False
        remove(session)
        return True

    def count(self):
        return Session.query.count()
