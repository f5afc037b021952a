from models import Movie
from repositories.movie_repo import MovieRepo
from services.errors import NotFoundError

MOVIE_FIELDS = ("title", "description", "duration", "genre", "rating", "poster_url")


class MovieService:

    def __init__(self, repo=None):
        self.repo = repo or MovieRepo()

    def create(self, data):
        movie = Movie(**{field: data[field] for field in MOVIE_FIELDS if field in data})
        return self.repo.create(movie)

    def get_by_id(self, movie_id):
        return self.repo.get_by_id(movie_id)

    def get_all(self):
        return self.repo.get_all()

    def update(self, movie_id, data):
        # PUT replaces the record, so absent fields fall back to their defaults
        movie = self.repo.get_by_id(movie_id)
        if movie is None:
            raise NotFoundError("movie not found")
        movie.title = data["title"]
        movie.description = data.get("description", "")
        movie.duration = data.get("duration", 0)
        movie.genre = data.get("genre", "")
        movie.rating = data.get("rating", 0.0)
        movie.poster_url = data.get("poster_url", "")
        return self.repo.update(movie)

    def delete(self, movie_id):
        return self.repo.delete(movie_id)
