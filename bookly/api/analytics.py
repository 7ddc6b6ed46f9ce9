"""Analytics routes consumed by the chat client's dashboard panel."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..data import analytics
from ..data.database import get_db

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db)):
    return {"success": True, "data": analytics.dashboard(db)}


@router.get("/customers")
def customers(db: Session = Depends(get_db)):
    return {"success": True, "data": analytics.top_customers(db)}
