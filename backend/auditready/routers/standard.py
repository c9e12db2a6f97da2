"""
Standards — /api/v1/standards
Compliance frameworks / regulations grouping requirements by reference.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from auditready.database import get_session
from auditready.models import Requirement, Standard, assessment_standards
from auditready.schemas.assessment import ComplianceStatsOut
from auditready.schemas.standard import StandardCreate, StandardOut, StandardUpdate
from auditready.services.assessment_stats import stats_out
from auditready.services.compliance_score import summarize

router = APIRouter(prefix="/api/v1/standards", tags=["Standards"])


# ─── Helpers ──────────────────────────────────────────────────


async def _standard_out(s: AsyncSession, st: Standard) -> StandardOut:
    q = select(Requirement.id).where(Requirement.standard_id == st.id).order_by(Requirement.id)
    req_ids = list((await s.execute(q)).scalars().all())
    return StandardOut(
        id=st.id,
        name=st.name,
        version=st.version,
        type=st.type,
        description=st.description,
        category=st.category,
        requirements=req_ids,
        created_at=st.created_at,
        updated_at=st.updated_at,
    )


async def _get_or_404(s: AsyncSession, standard_id: int) -> Standard:
    st = await s.get(Standard, standard_id)
    if not st:
        raise HTTPException(404, "Standard not found")
    return st


# ─── CRUD ─────────────────────────────────────────────────────


@router.get("", response_model=list[StandardOut])
async def list_standards(
    type: str | None = None,
    category: str | None = None,
    s: AsyncSession = Depends(get_session),
):
    q = select(Standard)
    if type:
        q = q.where(Standard.type == type)
    if category:
        q = q.where(Standard.category == category)
    q = q.order_by(Standard.name, Standard.version)
    rows = (await s.execute(q)).scalars().all()
    return [await _standard_out(s, st) for st in rows]


@router.get("/{standard_id}", response_model=StandardOut)
async def get_standard(standard_id: int, s: AsyncSession = Depends(get_session)):
    st = await _get_or_404(s, standard_id)
    return await _standard_out(s, st)


@router.post("", response_model=StandardOut, status_code=201)
async def create_standard(body: StandardCreate, s: AsyncSession = Depends(get_session)):
    data = body.model_dump()
    data["type"] = body.type.value
    st = Standard(**data)
    s.add(st)
    await s.commit()
    await s.refresh(st)
    return await _standard_out(s, st)


@router.put("/{standard_id}", response_model=StandardOut)
async def update_standard(
    standard_id: int, body: StandardUpdate, s: AsyncSession = Depends(get_session),
):
    st = await _get_or_404(s, standard_id)
    for k, v in body.model_dump(exclude_unset=True, mode="json").items():
        setattr(st, k, v)
    await s.commit()
    await s.refresh(st)
    return await _standard_out(s, st)


@router.delete("/{standard_id}", status_code=204)
async def delete_standard(standard_id: int, s: AsyncSession = Depends(get_session)):
    st = await _get_or_404(s, standard_id)
    cnt = (await s.execute(
        select(func.count()).where(Requirement.standard_id == standard_id)
    )).scalar() or 0
    if cnt:
        raise HTTPException(409, f"Standard still has {cnt} requirement(s)")
    used = (await s.execute(
        select(func.count()).where(assessment_standards.c.standard_id == standard_id)
    )).scalar() or 0
    if used:
        raise HTTPException(409, f"Standard is used by {used} assessment(s)")
    await s.delete(st)
    await s.commit()


# ─── Score ────────────────────────────────────────────────────


@router.get("/{standard_id}/stats", response_model=ComplianceStatsOut)
async def get_standard_stats(standard_id: int, s: AsyncSession = Depends(get_session)):
    await _get_or_404(s, standard_id)
    q = select(Requirement.status).where(Requirement.standard_id == standard_id)
    statuses = (await s.execute(q)).scalars().all()
    return stats_out(summarize(statuses))
