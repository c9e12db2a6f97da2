"""
Assessment statistics — requirement scope of an assessment and its scores.

An assessment covers every requirement whose standard is in the assessment's
standard set. Stats can be narrowed to one of those standards (the "active
standard" on the assessment page); the cached ``progress`` always covers the
full set.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auditready.models import Assessment, Requirement, assessment_standards
from auditready.schemas.assessment import AssessmentStatsOut, ComplianceStatsOut
from auditready.services.compliance_score import ComplianceSummary, summarize

logger = logging.getLogger(__name__)


def stats_out(summary: ComplianceSummary) -> ComplianceStatsOut:
    return ComplianceStatsOut(
        total_requirements=summary.total,
        fulfilled_count=summary.fulfilled,
        partial_count=summary.partially_fulfilled,
        not_fulfilled_count=summary.not_fulfilled,
        not_applicable_count=summary.not_applicable,
        progress=summary.progress,
        compliance_score=summary.compliance_score,
    )


async def requirements_for_assessment(
    s: AsyncSession, assessment: Assessment, standard_id: int | None = None,
) -> list[Requirement]:
    """Requirements in scope of the assessment, ordered by section then code."""
    standard_ids = assessment.standard_ids
    if standard_id is not None:
        if standard_id not in standard_ids:
            raise HTTPException(404, "Standard is not part of this assessment")
        standard_ids = [standard_id]
    if not standard_ids:
        return []

    q = (
        select(Requirement)
        .where(Requirement.standard_id.in_(standard_ids))
        .order_by(Requirement.section, Requirement.code, Requirement.id)
    )
    return list((await s.execute(q)).scalars().all())


async def assessment_stats(
    s: AsyncSession, assessment: Assessment, standard_id: int | None = None,
) -> AssessmentStatsOut:
    reqs = await requirements_for_assessment(s, assessment, standard_id)
    base = stats_out(summarize(reqs))
    return AssessmentStatsOut(
        assessment_id=assessment.id,
        standard_id=standard_id,
        **base.model_dump(),
    )


def group_by_section(requirements: Iterable[Requirement]) -> dict[str, list[Requirement]]:
    """Section -> requirements, sections in first-seen order."""
    grouped: dict[str, list[Requirement]] = {}
    for req in requirements:
        grouped.setdefault(req.section, []).append(req)
    return grouped


async def refresh_progress(s: AsyncSession, assessment: Assessment) -> int:
    """Recalculate and store the cached progress of one assessment."""
    reqs = await requirements_for_assessment(s, assessment)
    assessment.progress = summarize(reqs).progress
    await s.flush()
    return assessment.progress


async def refresh_progress_for_standard(s: AsyncSession, standard_id: int) -> int:
    """Refresh every assessment that covers ``standard_id``. Returns how many were touched."""
    q = (
        select(Assessment)
        .join(assessment_standards, assessment_standards.c.assessment_id == Assessment.id)
        .where(assessment_standards.c.standard_id == standard_id)
    )
    assessments = (await s.execute(q)).scalars().unique().all()
    for a in assessments:
        old = a.progress
        new = await refresh_progress(s, a)
        if old != new:
            logger.info("Assessment %s progress %s%% -> %s%%", a.id, old, new)
    return len(assessments)
