"""
Admin Stats API Routes
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lawlens.schemas.auth import AdminUser
from lawlens.services.stats_service import StatsService
from lawlens.dependencies.database import get_db
from lawlens.dependencies.auth import require_admin
from lawlens.core.logging import logger

router = APIRouter()


@router.get("")
def get_stats(
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(require_admin),
):
    """Dashboard totals and recent activity"""
    try:
        stats_service = StatsService(db)
        return {
            "stats": stats_service.get_stats(),
            "recentQuestions": stats_service.get_recent_questions(),
        }
    except Exception as e:
        logger.error(f"Admin stats error: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load stats")
