from datetime import datetime

from pydantic import BaseModel

from auditready.models.enums import AssessmentStatus


class RequirementStatusCounts(BaseModel):
    fulfilled: int = 0
    partially_fulfilled: int = 0
    not_fulfilled: int = 0
    not_applicable: int = 0


class DashboardStats(BaseModel):
    """Top-level figures for the dashboard cards and the compliance chart."""
    total_standards: int = 0
    total_requirements: int = 0
    total_assessments: int = 0
    compliance_score: int = 100
    requirement_status_counts: RequirementStatusCounts


class AssessmentProgressItem(BaseModel):
    id: int
    name: str
    status: AssessmentStatus
    progress: int
    updated_at: datetime
