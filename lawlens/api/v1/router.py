"""
API Router Configuration
"""

from fastapi import APIRouter
from lawlens.api.v1.routes import (
    search,
    admin_auth,
    admin_questions,
    admin_stats,
    bad_decision,
    payments,
)

api_router = APIRouter()

api_router.include_router(
    search.router,
    prefix="/search",
    tags=["Search"]
)

api_router.include_router(
    admin_auth.router,
    prefix="/admin",
    tags=["Admin Auth"]
)

api_router.include_router(
    admin_questions.router,
    prefix="/admin/questions",
    tags=["Admin Questions"]
)

api_router.include_router(
    admin_stats.router,
    prefix="/admin/stats",
    tags=["Admin Stats"]
)

api_router.include_router(
    bad_decision.router,
    prefix="/bad-decision",
    tags=["Bad Decision Calculator"]
)

api_router.include_router(
    payments.router,
    tags=["Payments"]
)
