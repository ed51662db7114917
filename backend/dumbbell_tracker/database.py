from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from dumbbell_tracker.config import get_settings

settings = get_settings()

# Create sync engine (using psycopg2)
# Convert postgresql:// to postgresql+psycopg2:// if needed
database_url = settings.database_url
if database_url.startswith("postgresql://"):
    database_url = database_url.replace("postgresql://", "postgresql+psycopg2://", 1)

engine_kwargs = {"pool_pre_ping": True}
if not database_url.startswith("sqlite"):
    engine_kwargs.update(pool_size=10, max_overflow=20)

engine = create_engine(database_url, **engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database sessions."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Run database migrations to ensure schema is up to date."""
    import os

    from sqlalchemy import inspect

    from alembic import command
    from alembic.config import Config

    # Get the path to alembic.ini
    backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    alembic_ini = os.path.join(backend_dir, "alembic.ini")

    if os.path.exists(alembic_ini):
        alembic_cfg = Config(alembic_ini)
        alembic_cfg.set_main_option("script_location", os.path.join(backend_dir, "alembic"))
        alembic_cfg.set_main_option("sqlalchemy.url", database_url)
        alembic_cfg.attributes["configure_logger"] = False

        # Tables created before alembic tracking was added get stamped instead of recreated
        table_names = inspect(engine).get_table_names()
        if "sessions" in table_names and "alembic_version" not in table_names:
            command.stamp(alembic_cfg, "001_initial")
        else:
            command.upgrade(alembic_cfg, "head")
    else:
        # Fallback to create_all for development without alembic.ini
        from dumbbell_tracker.models import Base

        Base.metadata.create_all(bind=engine)
