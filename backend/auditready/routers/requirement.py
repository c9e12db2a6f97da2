"""
Requirements — /api/v1/requirements
Compliance obligations, their variables and append-only status history.
Every status change refreshes the cached progress of covering assessments.
"""
import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from auditready.database import get_session
from auditready.models import Requirement, RequirementHistory, RequirementVariable, Standard
from auditready.schemas.requirement import (
    HistoryOut,
    RequirementCreate,
    RequirementOut,
    RequirementUpdate,
    StatusChange,
    VariableCreate,
    VariableOut,
    VariableUpdate,
)
from auditready.services.assessment_stats import refresh_progress_for_standard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/requirements", tags=["Requirements"])


# ─── Helpers ──────────────────────────────────────────────────


async def _load(s: AsyncSession, req_id: int) -> Requirement:
    q = (
        select(Requirement)
        .options(selectinload(Requirement.variables))
        .where(Requirement.id == req_id)
        .execution_options(populate_existing=True)
    )
    req = (await s.execute(q)).scalar_one_or_none()
    if not req:
        raise HTTPException(404, "Requirement not found")
    return req


async def _last_change(s: AsyncSession, req_id: int) -> RequirementHistory | None:
    q = (
        select(RequirementHistory)
        .where(RequirementHistory.requirement_id == req_id)
        .order_by(RequirementHistory.created_at.desc(), RequirementHistory.id.desc())
        .limit(1)
    )
    return (await s.execute(q)).scalar_one_or_none()


async def _last_changes(s: AsyncSession, req_ids: list[int]) -> dict[int, RequirementHistory]:
    """Latest history row per requirement, in one query. History is append-only: max id is newest."""
    if not req_ids:
        return {}
    latest = (
        select(func.max(RequirementHistory.id))
        .where(RequirementHistory.requirement_id.in_(req_ids))
        .group_by(RequirementHistory.requirement_id)
    )
    rows = (await s.execute(
        select(RequirementHistory).where(RequirementHistory.id.in_(latest))
    )).scalars().all()
    return {h.requirement_id: h for h in rows}


def requirement_out(req: Requirement, last: RequirementHistory | None = None) -> RequirementOut:
    return RequirementOut(
        id=req.id,
        standard_id=req.standard_id,
        section=req.section,
        code=req.code,
        name=req.name,
        description=req.description,
        guidance=req.guidance,
        status=req.status,
        evidence=req.evidence,
        notes=req.notes,
        responsible_party=req.responsible_party,
        last_assessment_date=req.last_assessment_date,
        variables=[VariableOut.model_validate(v) for v in req.variables],
        last_change=HistoryOut.model_validate(last) if last else None,
        created_at=req.created_at,
        updated_at=req.updated_at,
    )


# ─── CRUD ─────────────────────────────────────────────────────


@router.get("", response_model=list[RequirementOut])
async def list_requirements(
    standard_id: int | None = None,
    status: str | None = None,
    section: str | None = None,
    s: AsyncSession = Depends(get_session),
):
    q = select(Requirement).options(selectinload(Requirement.variables))
    if standard_id:
        q = q.where(Requirement.standard_id == standard_id)
    if status:
        q = q.where(Requirement.status == status)
    if section:
        q = q.where(Requirement.section == section)
    q = q.order_by(Requirement.standard_id, Requirement.section, Requirement.code, Requirement.id)
    rows = (await s.execute(q)).scalars().all()
    last = await _last_changes(s, [r.id for r in rows])
    return [requirement_out(r, last.get(r.id)) for r in rows]


@router.get("/{req_id}", response_model=RequirementOut)
async def get_requirement(req_id: int, s: AsyncSession = Depends(get_session)):
    req = await _load(s, req_id)
    return requirement_out(req, await _last_change(s, req.id))


@router.post("", response_model=RequirementOut, status_code=201)
async def create_requirement(body: RequirementCreate, s: AsyncSession = Depends(get_session)):
    if not await s.get(Standard, body.standard_id):
        raise HTTPException(404, "Standard not found")

    req = Requirement(
        standard_id=body.standard_id,
        section=body.section,
        code=body.code,
        name=body.name,
        description=body.description,
        guidance=body.guidance,
        status=body.status.value,
        evidence=body.evidence,
        notes=body.notes,
        responsible_party=body.responsible_party,
        last_assessment_date=date.today(),
    )
    s.add(req)
    await s.flush()

    for v in body.variables:
        s.add(RequirementVariable(requirement_id=req.id, name=v.name, value=v.value))
    s.add(RequirementHistory(
        requirement_id=req.id,
        status=req.status,
        comment="Initial status",
        updated_by=body.updated_by,
    ))
    await s.flush()

    await refresh_progress_for_standard(s, req.standard_id)
    await s.commit()

    req = await _load(s, req.id)
    return requirement_out(req, await _last_change(s, req.id))


@router.put("/{req_id}", response_model=RequirementOut)
async def update_requirement(
    req_id: int, body: RequirementUpdate, s: AsyncSession = Depends(get_session),
):
    req = await _load(s, req_id)
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(req, k, v)
    await s.commit()
    req = await _load(s, req_id)
    return requirement_out(req, await _last_change(s, req.id))


# ─── Status & history ─────────────────────────────────────────


@router.put("/{req_id}/status", response_model=RequirementOut)
async def change_requirement_status(
    req_id: int, body: StatusChange, s: AsyncSession = Depends(get_session),
):
    req = await _load(s, req_id)
    old_status = req.status

    req.status = body.status.value
    req.last_assessment_date = date.today()
    s.add(RequirementHistory(
        requirement_id=req.id,
        status=req.status,
        comment=body.comment or "Status updated",
        updated_by=body.updated_by,
    ))
    await s.flush()
    logger.info("Requirement %s status %s -> %s by %s", req.id, old_status, req.status, body.updated_by)

    await refresh_progress_for_standard(s, req.standard_id)
    await s.commit()

    req = await _load(s, req_id)
    return requirement_out(req, await _last_change(s, req.id))


@router.get("/{req_id}/history", response_model=list[HistoryOut])
async def list_requirement_history(req_id: int, s: AsyncSession = Depends(get_session)):
    await _load(s, req_id)
    q = (
        select(RequirementHistory)
        .where(RequirementHistory.requirement_id == req_id)
        .order_by(RequirementHistory.created_at.desc(), RequirementHistory.id.desc())
    )
    rows = (await s.execute(q)).scalars().all()
    return [HistoryOut.model_validate(h) for h in rows]


# ─── Variables ────────────────────────────────────────────────


@router.get("/{req_id}/variables", response_model=list[VariableOut])
async def list_variables(req_id: int, s: AsyncSession = Depends(get_session)):
    req = await _load(s, req_id)
    return [VariableOut.model_validate(v) for v in req.variables]


@router.post("/{req_id}/variables", response_model=VariableOut, status_code=201)
async def add_variable(
    req_id: int, body: VariableCreate, s: AsyncSession = Depends(get_session),
):
    await _load(s, req_id)
    var = RequirementVariable(requirement_id=req_id, name=body.name, value=body.value)
    s.add(var)
    await s.commit()
    await s.refresh(var)
    return VariableOut.model_validate(var)


@router.put("/{req_id}/variables/{variable_id}", response_model=VariableOut)
async def update_variable(
    req_id: int,
    variable_id: int,
    body: VariableUpdate,
    s: AsyncSession = Depends(get_session),
):
    var = await s.get(RequirementVariable, variable_id)
    if not var or var.requirement_id != req_id:
        raise HTTPException(404, "Variable not found")
    var.value = body.value
    await s.commit()
    await s.refresh(var)
    return VariableOut.model_validate(var)
