# danke/database.py
from contextlib import contextmanager
from typing import Optional
from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from danke.config import get_settings

_engine: Optional[Engine] = None


def build_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,  # Enable connection pool pre-ping
        pool_size=5,
        max_overflow=10
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings.database_url, echo=settings.db_echo)
    return _engine


# Create all tables
def create_db_and_tables(engine: Optional[Engine] = None):
    # Register every table on the metadata
    from danke.models import board, moderator, notification, post, user  # noqa: F401
    SQLModel.metadata.create_all(engine or get_engine())


# Session manager
@contextmanager
def get_session(engine: Optional[Engine] = None):
    session = Session(engine or get_engine())
    try:
        yield session
    finally:
        session.close()


# Function to verify database connection
def verify_database_connection(engine: Optional[Engine] = None) -> bool:
    try:
        with get_session(engine) as session:
            session.exec(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")
        return False


# Initialize database
def init_db(engine: Optional[Engine] = None):
    create_db_and_tables(engine)
    if verify_database_connection(engine):
        logger.info("Database initialized successfully")
    else:
        logger.error("Database initialization failed")
