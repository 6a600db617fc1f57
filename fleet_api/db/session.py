from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from fleet_api.core.config import settings

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator:
    """
    Dependency that provides a database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Commit everything staged inside the block as one unit.

    Any exception rolls the whole unit back before it propagates, so a
    multi-row change (trip + vehicle + driver) is either fully applied or
    not at all.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
