"""FastAPI dependencies."""

from fastapi import Depends
from sqlalchemy.orm import Session

from mindcalm.db.session import get_db
from mindcalm.services.state_store import StateStore


def get_store(db: Session = Depends(get_db)) -> StateStore:
    """State container bound to the request's DB session."""
    return StateStore(db)
