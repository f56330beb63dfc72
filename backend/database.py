"""
Database Configuration Module

This module handles the database configuration and connection setup for the Scrap Ledger API.
It uses SQLAlchemy for ORM (Object-Relational Mapping) with PostgreSQL as the database.

The module includes:
- Database connection setup
- Session management
- Base model class definition
- Soft delete filter implementation
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session, with_loader_criteria, declarative_base
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()

# Database connection settings
# These settings can be configured via environment variables
POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_SERVER = os.getenv("POSTGRES_SERVER", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_DB = os.getenv("POSTGRES_DB", "scrap_ledger")

# DATABASE_URL wins over the individual POSTGRES_* settings (tests use "sqlite://")
SQLALCHEMY_DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_SERVER}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

is_sqlite = SQLALCHEMY_DATABASE_URL.startswith("sqlite")

if is_sqlite:
    # A single shared connection so an in-memory database survives across sessions
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(SQLALCHEMY_DATABASE_URL, pool_pre_ping=True)

# autocommit=False: routers own the transaction and commit once at the end
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(Session, "do_orm_execute")
def add_soft_delete_filter(execute_state):
    """
    Event listener that automatically filters out "soft-deleted" records.

    Adds a filter to every ORM SELECT so rows whose 'deleted_at' is set are
    skipped. Aggregate queries over plain columns are not covered by this and
    filter on deleted_at themselves. Pass execution_options(include_deleted=True)
    to see stamped rows.
    """
    if (
        execute_state.is_select
        and not execute_state.is_relationship_load
        and not execute_state.execution_options.get("include_deleted", False)
    ):
        for entity in execute_state.statement.column_descriptions:
            entity_type = entity.get('entity')
            if entity_type is not None and hasattr(entity_type, 'deleted_at'):
                execute_state.statement = execute_state.statement.options(
                    with_loader_criteria(
                        entity_type,
                        lambda cls: cls.deleted_at.is_(None),
                        include_aliases=True
                    )
                )


def get_db():
    """
    Dependency function that provides a database session.

    Yields:
        Session: A SQLAlchemy database session, closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
