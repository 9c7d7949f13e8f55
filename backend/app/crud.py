import logging
import uuid
from pathlib import Path
from typing import List, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.models import Event
from backend.app import schemas

logger = logging.getLogger(__name__)

TRACKER_SCRIPT_ERROR = "Could not access tracker.js"


def generate_user_id() -> str:
    return str(uuid.uuid4())


def create_event(db: Session, data: schemas.TrackingData) -> Event:
    event = Event(user_id=data.userId, event=data.event, timestamp=data.timestamp)
    try:
        db.add(event)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Error saving event to database: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc)
        )
    return event


def count_events(db: Session) -> int:
    return db.execute(select(func.count(Event.id))).scalar_one()


def list_events(db: Session, limit: int, offset: int) -> Tuple[List[Event], int]:
    query = (
        select(Event)
        .order_by(Event.timestamp.desc(), Event.id.desc())
        .limit(limit)
        .offset(offset)
    )
    try:
        events = list(db.execute(query).scalars().all())
    except SQLAlchemyError as exc:
        logger.error(f"Error fetching events: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch events: {exc}"
        )

    try:
        total = count_events(db)
    except SQLAlchemyError as exc:
        logger.error(f"Error counting events: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get total count: {exc}"
        )

    return events, total


def load_tracker_script(path: Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        logger.error(f"Cannot read tracker script at {path}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=TRACKER_SCRIPT_ERROR
        )
