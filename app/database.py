from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
import os
import logging
from dotenv import load_dotenv

from app.utils.errors import Conflict, Internal

load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./task_manager.db")


def build_engine(url: str):
    """Create an engine with the connect args the backend needs"""
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    elif os.getenv("DB_SSLMODE"):
        # If you're using PostgreSQL on Render or similar, set DB_SSLMODE=require
        connect_args["sslmode"] = os.getenv("DB_SSLMODE")
    return create_engine(url, connect_args=connect_args)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Imported wherever a DB session is needed; tests override it
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """Unit of work: commit everything done inside the block, or nothing.

    Unique/foreign key violations raised by the store surface as Conflict,
    any other store failure as Internal.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error, transaction rolled back: {e.orig}")
        raise Conflict("Resource conflicts with existing data")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database error, transaction rolled back")
        raise Internal()
    except Exception:
        db.rollback()
        raise
