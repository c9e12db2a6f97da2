"""
Dashboard API — /api/v1/dashboard

Figures for the stats cards, the compliance status chart and the
assessment progress list.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auditready.database import get_session
from auditready.schemas.dashboard import AssessmentProgressItem, DashboardStats
from auditready.services import dashboard as svc

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Totals, overall compliance score and requirement status counts",
)
async def dashboard_stats(s: AsyncSession = Depends(get_session)):
    return await svc.get_dashboard_stats(s)


@router.get(
    "/assessment-progress",
    response_model=list[AssessmentProgressItem],
    summary="Assessments with their cached progress, most recently updated first",
)
async def assessment_progress(s: AsyncSession = Depends(get_session)):
    return await svc.get_assessment_progress(s)
