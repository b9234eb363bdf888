# backend/database.py
import logging
import time
from typing import Callable, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from dotenv import load_dotenv

from config import settings
from errors import ConflictError, TransientStoreError

load_dotenv()
logger = logging.getLogger(__name__)

T = TypeVar("T")

# 1. Database URL comes from settings (env / .env), SQLite file by default
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# 2. Some hosts hand out postgres:// URLs, SQLAlchemy needs postgresql://
if SQLALCHEMY_DATABASE_URL and SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgres://", "postgresql://", 1)


def _connect_args(url: str, timeout: int) -> dict:
    # Every store access must give up instead of hanging
    if "sqlite" in url:
        return {"check_same_thread": False, "timeout": timeout}
    if url.startswith("postgresql"):
        return {"connect_timeout": timeout, "options": f"-c statement_timeout={timeout * 1000}"}
    return {}


def make_engine(url: str = SQLALCHEMY_DATABASE_URL, timeout: int = settings.DB_TIMEOUT_SECONDS):
    kwargs = {"connect_args": _connect_args(url, timeout)}
    if "sqlite" not in url:
        kwargs["pool_timeout"] = timeout
    return create_engine(url, **kwargs)


engine = make_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    Base.metadata.create_all(bind=engine)


def run_in_transaction(db: Session, work: Callable[[Session], T], attempts: int = None) -> T:
    """
    Runs `work(db)` and commits it as a single unit of work.

    Version conflicts (StaleDataError), duplicate inserts (IntegrityError) and
    lock timeouts (OperationalError) roll the session back and rerun `work`
    from scratch, up to `attempts` times, sleeping a little longer before
    each new attempt. Domain errors raised by `work` roll back and propagate
    unchanged.
    """
    attempts = attempts or settings.STORE_RETRY_ATTEMPTS
    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            result = work(db)
            db.commit()
            return result
        except (StaleDataError, IntegrityError, OperationalError) as e:
            db.rollback()
            last_error = e
            logger.warning("Transaction conflict (attempt %s/%s): %s", attempt, attempts, e)
            if attempt < attempts:
                # Linear backoff: base delay times the attempt number
                time.sleep(settings.STORE_RETRY_BACKOFF_SECONDS * attempt)
        except Exception:
            db.rollback()
            raise

    if isinstance(last_error, IntegrityError):
        raise ConflictError("Concurrent update conflict, please retry") from last_error
    raise TransientStoreError("Store is busy, please retry") from last_error
