"""Schemas for assessment templates."""

from datetime import datetime

from pydantic import Field

from artemis_client.enums import AssessmentDifficulty
from artemis_client.schemas.base_schema_model import BaseSchemaModel


class Assessment(BaseSchemaModel):
    """An AI-driven skill assessment created by an employer."""

    id: str = Field(..., alias="_id")
    title: str
    description: str = ""
    profession: str = ""
    role: str = ""
    skills: list[str] = Field(default_factory=list)
    difficulty: AssessmentDifficulty = AssessmentDifficulty.INTERMEDIATE
    question_count: int = Field(default=0, ge=0)
    time_limit_minutes: int = Field(..., ge=0)
    created_by: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AssessmentList(BaseSchemaModel):
    """Page of assessments returned by GET /api/assessments."""

    assessments: list[Assessment] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20


class AssessmentCreate(BaseSchemaModel):
    """Fields accepted when creating or updating an assessment.

    Every field is optional so the same model serves partial updates.
    """

    title: str | None = None
    description: str | None = None
    profession: str | None = None
    role: str | None = None
    skills: list[str] | None = None
    difficulty: AssessmentDifficulty | None = None
    question_count: int | None = Field(default=None, ge=1)
    time_limit_minutes: int | None = Field(default=None, ge=1)
    is_active: bool | None = None
