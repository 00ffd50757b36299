"""
Database engine and session factory (SQLAlchemy)

Nothing here is module-level state: the application factory creates one
engine per app and keeps it on ``app.state``; scripts build their own.
"""
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from screentime.config import Settings, get_settings


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all ORM models
    """
    pass


def create_db_engine(settings: Settings | None = None) -> Engine:
    """Pooled engine for DATABASE_URL; connections are checked on checkout"""
    settings = settings or get_settings()
    return create_engine(settings.get_sqlalchemy_url(), pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def check_db_connection(engine: Engine) -> None:
    """
    Readiness check - the database answers a trivial query

    Raises:
        sqlalchemy.exc.OperationalError: if the database is unreachable
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
