from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from resourcedesk.core.config import Settings, get_settings
from resourcedesk.db.session import SessionLocal
from resourcedesk.services.slot_allocator import SessionPolicy


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_policy(settings: Settings = Depends(get_settings)) -> SessionPolicy:
    return settings.session_policy()
