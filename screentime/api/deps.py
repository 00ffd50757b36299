"""
FastAPI dependencies (DB session)
"""
from fastapi import Request
from sqlalchemy.orm import Session


def get_db(request: Request) -> Session:
    """
    One session per request from the app's session factory, closed on
    every exit path

    Usage:
        @router.get("/time")
        def get_time(db: Session = Depends(get_db)):
            ...
    """
    SessionLocal = request.app.state.session_factory
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
