"""Module: health."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from petvet.api.v1.routes.deps import get_db

router = APIRouter()

# Endpoint: lightweight health probe for service liveness.
@router.get("/health")
def health():
    return {"status": "ok"}


# Endpoint: readiness probe that round-trips the database.
@router.get("/db")
def health_db(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "reachable"}
