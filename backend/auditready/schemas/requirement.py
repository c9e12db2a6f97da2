from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from auditready.models.enums import RequirementStatus


class VariableOut(BaseModel):
    id: int
    requirement_id: int
    name: str
    value: str
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}


class VariableCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    value: str = ""


class VariableUpdate(BaseModel):
    value: str


class HistoryOut(BaseModel):
    id: int
    requirement_id: int
    status: RequirementStatus
    comment: str | None = None
    updated_by: str
    created_at: datetime
    model_config = {"from_attributes": True}


class RequirementOut(BaseModel):
    id: int
    standard_id: int
    section: str
    code: str
    name: str
    description: str | None = None
    guidance: str | None = None
    status: RequirementStatus
    evidence: str | None = None
    notes: str | None = None
    responsible_party: str | None = None
    last_assessment_date: date | None = None
    variables: list[VariableOut] = []
    last_change: HistoryOut | None = None
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}


class RequirementCreate(BaseModel):
    standard_id: int
    section: str = Field("General", min_length=1, max_length=200)
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    guidance: str | None = None
    status: RequirementStatus = RequirementStatus.NOT_FULFILLED
    evidence: str | None = None
    notes: str | None = None
    responsible_party: str | None = Field(None, max_length=200)
    variables: list[VariableCreate] = []
    updated_by: str = Field("system", max_length=200)


class RequirementUpdate(BaseModel):
    """Descriptive fields only; status goes through /status so history stays complete."""
    section: str | None = Field(None, min_length=1, max_length=200)
    code: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    guidance: str | None = None
    evidence: str | None = None
    notes: str | None = None
    responsible_party: str | None = Field(None, max_length=200)

    @field_validator("section", "code", "name")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


class StatusChange(BaseModel):
    status: RequirementStatus
    comment: str | None = None
    updated_by: str = Field("system", max_length=200)


class RequirementSection(BaseModel):
    section: str
    requirements: list[RequirementOut]
