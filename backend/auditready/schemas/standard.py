from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from auditready.models.enums import StandardType


class StandardOut(BaseModel):
    id: int
    name: str
    version: str
    type: StandardType
    description: str | None = None
    category: str | None = None
    requirements: list[int] = []  # requirement ids, by reference
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}


class StandardCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=300)
    version: str = Field("1.0", max_length=50)
    type: StandardType = StandardType.FRAMEWORK
    description: str | None = None
    category: str | None = Field(None, max_length=100)


class StandardUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=300)
    version: str | None = Field(None, max_length=50)
    type: StandardType | None = None
    description: str | None = None
    category: str | None = Field(None, max_length=100)

    @field_validator("name", "version", "type")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v
