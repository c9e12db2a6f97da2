"""
Dashboard service — organisation-wide compliance figures.
"""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from auditready.models import Assessment, Requirement, Standard
from auditready.schemas.dashboard import (
    AssessmentProgressItem,
    DashboardStats,
    RequirementStatusCounts,
)
from auditready.services.compliance_score import summarize


async def _count(s: AsyncSession, model) -> int:
    return (await s.execute(select(func.count()).select_from(model))).scalar() or 0


async def get_dashboard_stats(s: AsyncSession) -> DashboardStats:
    # Only the status column is needed for scoring
    statuses = (await s.execute(select(Requirement.status))).scalars().all()
    summary = summarize(statuses)

    return DashboardStats(
        total_standards=await _count(s, Standard),
        total_requirements=len(statuses),
        total_assessments=await _count(s, Assessment),
        compliance_score=summary.compliance_score,
        requirement_status_counts=RequirementStatusCounts(**summary.status_counts()),
    )


async def get_assessment_progress(s: AsyncSession) -> list[AssessmentProgressItem]:
    q = select(Assessment).order_by(Assessment.updated_at.desc(), Assessment.id.desc())
    rows = (await s.execute(q)).scalars().all()
    return [
        AssessmentProgressItem(
            id=a.id,
            name=a.name,
            status=a.status,
            progress=a.progress,
            updated_at=a.updated_at,
        )
        for a in rows
    ]
