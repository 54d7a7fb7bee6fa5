"""Database configuration and session management."""

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from groceryplanner.config import settings


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


engine = create_engine(settings.database_url, echo=settings.sql_echo)
SessionLocal = sessionmaker(engine, class_=Session, expire_on_commit=False)
