from models import Movie, db
from repositories.base import commit, remove, save


class MovieRepo:

    def create(self, movie):
        return save(movie)

    def get_by_id(self, movie_id):
        return db.session.get(Movie, movie_id)

    def get_all(self):
        return Movie.query.order_by(Movie.id.asc()).all()

    def update(self, movie):
        commit()
        return movie

    def delete(self, movie_id):
        movie = self.get_by_id(movie_id)
        if movie is None:
            return False
        remove(movie)
        return True

    def count(self):
        return Movie.query.count()
