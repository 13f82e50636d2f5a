"""
Database engine + session factory.

Defaults to SQLite for local dev, Postgres in production.
"""
from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from leadwell.config import DATABASE_URL


def utcnow():
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):

    def to_dict(self):
        """Plain dict of column values keyed by column name."""
        return {column.name: getattr(self, column.key) for column in self.__table__.columns}


def make_engine(database_url, **engine_kwargs):
    """Build an engine for the given URL with dialect-appropriate settings."""
    # Heroku/Railway inject postgres:// but SQLAlchemy 2.x requires postgresql://
    url = database_url.replace('postgres://', 'postgresql://', 1)

    if url.startswith('sqlite'):
        engine = create_engine(url, connect_args={'check_same_thread': False}, **engine_kwargs)
        event.listen(engine, 'connect', _enable_sqlite_foreign_keys)
    else:
        engine_kwargs.setdefault('pool_pre_ping', True)
        engine_kwargs.setdefault('pool_size', 5)
        engine_kwargs.setdefault('max_overflow', 10)
        engine = create_engine(url, **engine_kwargs)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


def import_models():
    """Import every model module so Base.metadata knows about all tables."""
    import leadwell.models  # noqa: F401


def init_db(bind=None):
    """Create all tables. Production schemas are managed by Alembic."""
    import_models()
    Base.metadata.create_all(bind or engine)
