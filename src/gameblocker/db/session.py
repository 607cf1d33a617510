# src/gameblocker/db/session.py
import os
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

DB_PATH = os.environ.get("GAMEBLOCKER_DB", "gameblocker.db")
ENGINE = create_engine(f"sqlite:///{DB_PATH}", connect_args={"check_same_thread": False, "timeout": 30}, echo=False)
SessionLocal = sessionmaker(bind=ENGINE, autoflush=False, autocommit=False)


def init_db(engine=ENGINE):
    Base.metadata.create_all(bind=engine)


def get_db() -> Iterator[Session]:
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
