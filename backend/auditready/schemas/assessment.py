from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from auditready.models.enums import AssessmentStatus


class ComplianceStatsOut(BaseModel):
    total_requirements: int = 0
    fulfilled_count: int = 0
    partial_count: int = 0
    not_fulfilled_count: int = 0
    not_applicable_count: int = 0
    progress: int = 100
    compliance_score: int = 100


class AssessmentOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    standard_ids: list[int]
    status: AssessmentStatus
    progress: int
    start_date: date
    end_date: date | None = None
    assessor_name: str | None = None
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}


class AssessmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=300)
    description: str | None = None
    standard_ids: list[int] = Field(..., min_length=1)
    start_date: date | None = None
    end_date: date | None = None
    assessor_name: str | None = Field(None, max_length=200)


class AssessmentUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = None
    standard_ids: list[int] | None = Field(None, min_length=1)
    status: AssessmentStatus | None = None
    start_date: date | None = None
    end_date: date | None = None
    assessor_name: str | None = Field(None, max_length=200)

    @field_validator("name", "standard_ids", "status", "start_date")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


class AssessmentStatsOut(ComplianceStatsOut):
    assessment_id: int
    standard_id: int | None = None  # active standard filter, None = all
