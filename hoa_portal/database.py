# hoa_portal/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL. The engine is owned by a Database object
that the application factory constructs and disposes, so tests and scripts
can point it at any URL.
"""

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


class Database:
    """Engine + session factory for one database URL."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        if url.startswith("sqlite"):
            # In-memory SQLite must share one connection across threads
            self.engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                url,
                pool_pre_ping=True,          # Auto-reconnect if DB connection drops
                pool_size=10,
                max_overflow=20,
                echo=echo,
            )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self):
        return self.SessionLocal()

    def create_tables(self):
        """
        Creates all DB tables. Safe to call multiple times.
        Models are imported here so SQLAlchemy knows about them.
        """
        import hoa_portal.models  # noqa

        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def dispose(self):
        self.engine.dispose()


def get_db(request: Request):
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
