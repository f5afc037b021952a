from sqlalchemy.exc import SQLAlchemyError

from models import db


def commit():
    """Commit the current unit of work, rolling back on failure."""
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def save(instance):
    db.session.add(instance)
    commit()
    return instance


def remove(instance):
    db.session.delete(instance)
    commit()
