"""
Typed records consumed and produced by the matching system.

Upstream records (LLM output, stored documents, request bodies) are loosely
shaped: fields may be missing or null. Every model here drops null values
before validation so that the declared defaults apply, which lets the scoring
engine work on complete values only. Wrongly typed values still fail
validation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Record(BaseModel):
    """Base model: immutable, ignores unknown keys, treats null as missing."""

    model_config = ConfigDict(frozen=True, extra="ignore", protected_namespaces=())

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


def camel_alias(name: str) -> AliasChoices:
    """Accept a field under its snake_case name or the camelCase name stored documents use."""
    head, *rest = name.split("_")
    return AliasChoices(name, head + "".join(part.capitalize() for part in rest))


def _clamp_percentage(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(min(100, max(0, round(value))))
    return value


class ExperienceSummary(Record):
    years: float = Field(default=0, ge=0)
    industries: List[str] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)


class SkillGap(Record):
    skill: str
    importance: str = "Medium"

    @field_validator("importance")
    @classmethod
    def validate_importance(cls, v: str) -> str:
        normalized = v.strip().capitalize()
        if normalized not in ("High", "Medium", "Low"):
            raise ValueError(f"importance must be High, Medium or Low, got {v!r}")
        return normalized


class FormattingReport(Record):
    score: int = Field(default=0, ge=0, le=100)
    issues: List[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v: Any) -> Any:
        return _clamp_percentage(v)


class ResumeAnalysis(Record):
    """Normalized output of resume analysis."""

    ats_score: int = Field(default=0, ge=0, le=100)
    overall_match: int = Field(default=0, ge=0, le=100)
    interview_probability: int = Field(default=0, ge=0, le=100)
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    skill_gaps: List[SkillGap] = Field(default_factory=list)
    key_skills: List[str] = Field(default_factory=list)
    experience: ExperienceSummary = Field(default_factory=ExperienceSummary)
    keywords: List[str] = Field(default_factory=list)
    formatting: FormattingReport = Field(default_factory=FormattingReport)
    analyzed_at: Optional[datetime] = None
    model_used: Optional[str] = None

    @field_validator("ats_score", "overall_match", "interview_probability", mode="before")
    @classmethod
    def clamp_scores(cls, v: Any) -> Any:
        return _clamp_percentage(v)

    @field_validator("skill_gaps", mode="before")
    @classmethod
    def expand_bare_gaps(cls, v: Any) -> Any:
        # LLMs sometimes list gaps as plain skill names
        if isinstance(v, list):
            return [{"skill": item} if isinstance(item, str) else item for item in v]
        return v


class Resume(Record):
    """A resume's raw text together with its analysis."""

    id: str = ""
    file_name: str = "resume.txt"
    content: str = ""
    analysis: ResumeAnalysis = Field(default_factory=ResumeAnalysis)
    uploaded_at: datetime = Field(default_factory=utc_now)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


class Salary(Record):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"


class JobPosting(Record):
    """A job's structured attributes as supplied by storage."""

    id: str = Field(default="", validation_alias=AliasChoices("id", "_id"))
    title: str = ""
    company: str = ""
    location: str = ""
    job_type: str = Field(default="Full-time", validation_alias=camel_alias("job_type"))
    experience_level: str = Field(default="Mid", validation_alias=camel_alias("experience_level"))
    salary: Salary = Field(default_factory=Salary)
    description: str = ""
    required_skills: List[str] = Field(default_factory=list, validation_alias=camel_alias("required_skills"))
    preferred_skills: List[str] = Field(default_factory=list, validation_alias=camel_alias("preferred_skills"))
    experience_required: float = Field(default=0, ge=0, validation_alias=camel_alias("experience_required"))
    benefits: List[str] = Field(default_factory=list)
    application_url: Optional[str] = Field(default=None, validation_alias=camel_alias("application_url"))
    is_active: bool = Field(default=True, validation_alias=camel_alias("is_active"))
    posted_date: datetime = Field(default_factory=utc_now, validation_alias=camel_alias("posted_date"))
    applicants: int = Field(default=0, ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    def summary(self) -> Dict[str, Any]:
        """Fields shown next to a match result."""
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "salary": self.salary.model_dump(),
            "job_type": self.job_type,
            "description": self.description,
        }


class MatchResult(Record):
    """Score and skill breakdown for one resume-job pair."""

    match_score: int = Field(ge=0, le=100)
    matching_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    experience_match: float = Field(ge=0, le=100)
    skills_match: float = Field(ge=0, le=100)
    breakdown: Dict[str, float] = Field(default_factory=dict)


class FitAnalysis(Record):
    """Single-job fit verdict from a fit analyzer."""

    match_score: int = Field(default=0, ge=0, le=100)
    key_matches: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    requirements_met: int = Field(default=0, ge=0)
    total_requirements: int = Field(default=0, ge=0)
    reasoning: str = ""
    recommendation: str = ""
    analyzed_by: str = ""

    @field_validator("match_score", mode="before")
    @classmethod
    def clamp_match_score(cls, v: Any) -> Any:
        return _clamp_percentage(v)
