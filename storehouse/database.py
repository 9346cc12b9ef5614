from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

# Database Configuration from environment variables
DB_HOST = os.getenv("DB_HOST")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_NAME = os.getenv("DB_NAME")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "database").lower()
LOG_PLAIN_KANBAN_EDITS = os.getenv("LOG_PLAIN_KANBAN_EDITS", "false").lower() in ("1", "true", "yes", "on")


def build_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if DB_HOST:
        return f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    return "sqlite:///./storehouse.db"


DATABASE_URL = build_database_url()


# Create database if it doesn't exist
def create_database_if_not_exists(database_url: str = DATABASE_URL):
    url = make_url(database_url)
    if url.get_backend_name() != "postgresql":
        return
    server_url = url.set(database="postgres")
    db_name = url.database

    try:
        engine = create_engine(server_url, isolation_level="AUTOCOMMIT")
        with engine.connect() as conn:
            # Check if database exists
            result = conn.execute(text("SELECT 1 FROM pg_database WHERE datname = :name"), {"name": db_name})
            if not result.fetchone():
                conn.execute(text(f'CREATE DATABASE "{db_name}"'))
                logger.info(f"Database '{db_name}' created successfully!")
            else:
                logger.info(f"Database '{db_name}' already exists.")
        engine.dispose()
    except Exception as e:
        logger.error(f"Error creating database: {e}")


def make_engine(database_url: str):
    """Create an engine, with the SQLite tweaks needed to share it across request threads."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    """Create all tables that don't exist yet."""
    # Models register themselves on Base.metadata when imported
    from storehouse.models import position, kanban_pallet, movement  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
