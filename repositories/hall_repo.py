from models import Hall, db
from repositories.base import commit, remove, save


class HallRepo:

    def create(self, hall):
        return save(hall)

    def get_by_id(self, hall_id):
        return db.session.get(Hall, hall_id)

    def get_all(self):
        return Hall.query.order_by(Hall.id.asc()).all()

    def update(self, hall):
        commit()
        return hall

    def delete(self, hall_id):
        hall = self.get_by_id(hall_id)
        if hall is None:
            return False
        remove(hall)
        return True

    def count(self):
        return Hall.query.count()
