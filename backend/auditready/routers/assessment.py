"""
Assessments — /api/v1/assessments
Evaluation exercises over one or more standards: CRUD, lifecycle
(draft → in-progress → completed), statistics and grouped requirement views.
"""
import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from auditready.database import get_session
from auditready.models import Assessment, Standard, assessment_standards
from auditready.models.enums import ASSESSMENT_TRANSITIONS, AssessmentStatus
from auditready.routers.requirement import requirement_out
from auditready.schemas.assessment import (
    AssessmentCreate,
    AssessmentOut,
    AssessmentStatsOut,
    AssessmentUpdate,
)
from auditready.schemas.requirement import RequirementOut, RequirementSection
from auditready.services.assessment_stats import (
    assessment_stats,
    group_by_section,
    refresh_progress,
    requirements_for_assessment,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/assessments", tags=["Assessments"])


# ─── Helpers ──────────────────────────────────────────────────


def _assessment_out(a: Assessment) -> AssessmentOut:
    return AssessmentOut(
        id=a.id,
        name=a.name,
        description=a.description,
        standard_ids=a.standard_ids,
        status=a.status,
        progress=a.progress,
        start_date=a.start_date,
        end_date=a.end_date,
        assessor_name=a.assessor_name,
        created_at=a.created_at,
        updated_at=a.updated_at,
    )


async def _load(s: AsyncSession, assessment_id: int) -> Assessment:
    q = (
        select(Assessment)
        .options(selectinload(Assessment.standards))
        .where(Assessment.id == assessment_id)
        .execution_options(populate_existing=True)
    )
    a = (await s.execute(q)).scalar_one_or_none()
    if not a:
        raise HTTPException(404, "Assessment not found")
    return a


async def _resolve_standards(s: AsyncSession, standard_ids: list[int]) -> list[Standard]:
    wanted = list(dict.fromkeys(standard_ids))
    rows = (await s.execute(select(Standard).where(Standard.id.in_(wanted)))).scalars().all()
    found = {st.id: st for st in rows}
    missing = [sid for sid in wanted if sid not in found]
    if missing:
        raise HTTPException(404, f"Standard(s) not found: {', '.join(map(str, missing))}")
    return [found[sid] for sid in wanted]


def _check_transition(current: str, target: AssessmentStatus) -> None:
    cur = AssessmentStatus(current)
    if target == cur or target in ASSESSMENT_TRANSITIONS[cur]:
        return
    raise HTTPException(409, f"Cannot change assessment status from '{cur.value}' to '{target.value}'")


# ─── CRUD ─────────────────────────────────────────────────────


@router.get("", response_model=list[AssessmentOut])
async def list_assessments(
    status: str | None = Query(None),
    standard_id: int | None = Query(None),
    s: AsyncSession = Depends(get_session),
):
    q = select(Assessment).options(selectinload(Assessment.standards))
    if status:
        q = q.where(Assessment.status == status)
    if standard_id:
        q = q.join(
            assessment_standards, assessment_standards.c.assessment_id == Assessment.id,
        ).where(assessment_standards.c.standard_id == standard_id)
    q = q.order_by(Assessment.start_date.desc(), Assessment.id.desc())
    rows = (await s.execute(q)).scalars().unique().all()
    return [_assessment_out(a) for a in rows]


@router.get("/{assessment_id}", response_model=AssessmentOut)
async def get_assessment(assessment_id: int, s: AsyncSession = Depends(get_session)):
    return _assessment_out(await _load(s, assessment_id))


@router.post("", response_model=AssessmentOut, status_code=201)
async def create_assessment(body: AssessmentCreate, s: AsyncSession = Depends(get_session)):
    standards = await _resolve_standards(s, body.standard_ids)
    a = Assessment(
        name=body.name,
        description=body.description,
        status=AssessmentStatus.DRAFT.value,
        start_date=body.start_date or date.today(),
        end_date=body.end_date,
        assessor_name=body.assessor_name,
        standards=standards,
    )
    s.add(a)
    await s.flush()
    await refresh_progress(s, a)
    await s.commit()
    return _assessment_out(await _load(s, a.id))


@router.put("/{assessment_id}", response_model=AssessmentOut)
async def update_assessment(
    assessment_id: int, body: AssessmentUpdate, s: AsyncSession = Depends(get_session),
):
    a = await _load(s, assessment_id)
    changes = body.model_dump(exclude_unset=True)

    if "standard_ids" in changes:
        a.standards = await _resolve_standards(s, changes.pop("standard_ids"))
        await s.flush()
        await refresh_progress(s, a)

    if "status" in changes:
        target = changes.pop("status")
        _check_transition(a.status, target)
        if target.value != a.status:
            logger.info("Assessment %s status %s -> %s", a.id, a.status, target.value)
        a.status = target.value
        if target == AssessmentStatus.COMPLETED and a.end_date is None and "end_date" not in changes:
            a.end_date = date.today()

    for k, v in changes.items():
        setattr(a, k, v)

    await s.commit()
    return _assessment_out(await _load(s, assessment_id))


@router.delete("/{assessment_id}", status_code=204)
async def delete_assessment(assessment_id: int, s: AsyncSession = Depends(get_session)):
    a = await _load(s, assessment_id)
    await s.delete(a)
    await s.commit()


# ─── Statistics & requirement views ───────────────────────────


@router.get("/{assessment_id}/stats", response_model=AssessmentStatsOut)
async def get_assessment_stats(
    assessment_id: int,
    standard_id: int | None = Query(None, description="Active standard; omit for all standards"),
    s: AsyncSession = Depends(get_session),
):
    a = await _load(s, assessment_id)
    return await assessment_stats(s, a, standard_id)


@router.get(
    "/{assessment_id}/requirements",
    response_model=list[RequirementOut] | list[RequirementSection],
)
async def list_assessment_requirements(
    assessment_id: int,
    standard_id: int | None = Query(None, description="Active standard; omit for all standards"),
    group_by: str | None = Query(None, pattern="^section$"),
    s: AsyncSession = Depends(get_session),
):
    a = await _load(s, assessment_id)
    reqs = await requirements_for_assessment(s, a, standard_id)
    if group_by == "section":
        return [
            RequirementSection(section=section, requirements=[requirement_out(r) for r in items])
            for section, items in group_by_section(reqs).items()
        ]
    return [requirement_out(r) for r in reqs]
