"""Health checks and monitoring endpoints"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.config.database import get_db

health_router = APIRouter()


@health_router.get("/")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "studio-booking-api"}


@health_router.get("/detailed")
async def detailed_health_check(request: Request, db: Session = Depends(get_db)):
    """Detailed health check with dependencies"""
    checks = {
        "api": "healthy",
        "database": "unknown",
        "calendar": "unknown",
        "overall": "unknown"
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        checks["database"] = f"unhealthy: {str(e)}"

    # Calendar sync is optional, report whether it is wired up
    calendar = getattr(request.app.state, "calendar_service", None)
    checks["calendar"] = "configured" if calendar is not None and calendar.is_configured else "disabled"

    # Overall status
    if checks["database"] == "healthy":
        checks["overall"] = "healthy"
    else:
        checks["overall"] = "degraded"

    return checks
