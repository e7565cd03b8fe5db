from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, ConfigDict

from matching.schemas import FitAnalysis, JobPosting, Resume, ResumeAnalysis


class AnalyzeResumeRequest(BaseModel):
    content: str = Field(..., description="Plain-text resume content")
    file_name: str = Field(default="resume.txt", description="Original file name, for display")

    @field_validator("content")
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Resume content is empty")
        if len(v) > 200_000:
            raise ValueError("Resume content is too long")
        return v


class AnalyzeResumeResponse(BaseModel):
    success: bool = True
    resume_id: str
    analysis: ResumeAnalysis


class ResumeSummary(BaseModel):
    """A stored resume without its full text."""
    id: str
    file_name: str
    uploaded_at: datetime
    analysis: ResumeAnalysis


class ResumeHistoryResponse(BaseModel):
    resumes: List[ResumeSummary]


class ResumeResponse(BaseModel):
    resume: Resume


class ImproveResumeRequest(BaseModel):
    target_job: Optional[str] = Field(
        default=None,
        description="Free-text description of the job the resume should target"
    )


class ImproveResumeResponse(BaseModel):
    improvements: List[str]


class Pagination(BaseModel):
    current: int
    total: int
    count: int
    total_jobs: int


class JobSearchResponse(BaseModel):
    jobs: List[JobPosting]
    pagination: Pagination


class JobResponse(BaseModel):
    job: JobPosting


class MatchJobsRequest(BaseModel):
    resume_id: str
    limit: int = Field(default=10, ge=0, le=50)


class JobMatch(BaseModel):
    job: Dict[str, Any]
    match_score: int = Field(ge=0, le=100)
    matching_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    experience_match: float
    skills_match: float


class MatchJobsResponse(BaseModel):
    matches: List[JobMatch]
    total_evaluated: int


class AnalyzeFitRequest(BaseModel):
    resume_id: str


class AnalyzeFitResponse(BaseModel):
    fit_analysis: FitAnalysis


class BulkImportRequest(BaseModel):
    jobs: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("jobs")
    def validate_jobs(cls, v: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if len(v) == 0:
            raise ValueError("At least one job is required")
        if len(v) > 500:
            raise ValueError("A maximum of 500 jobs is allowed")
        return v


class BulkImportResponse(BaseModel):
    success: bool = True
    count: int
    message: str


class RecommendationsResponse(BaseModel):
    recommendations: List[JobMatch]


class DashboardStats(BaseModel):
    total_resumes: int
    avg_ats_score: int
    latest_resume_score: int
    interview_probability: int
    last_updated: Optional[datetime] = None


class DashboardResponse(BaseModel):
    stats: DashboardStats


class ResumePerformancePoint(BaseModel):
    date: datetime
    file_name: str
    ats_score: int
    overall_match: int
    interview_probability: int


class ResumePerformanceResponse(BaseModel):
    performance_data: List[ResumePerformancePoint]


class SkillGapTrend(BaseModel):
    skill: str
    frequency: int
    importance: str
    first_seen: datetime


class SkillTrendsResponse(BaseModel):
    top_skill_gaps: List[SkillGapTrend]
    total_skills_acquired: int
    skills_acquired: List[str]


class Insight(BaseModel):
    type: str = Field(description="warning|success|info")
    category: str
    title: str
    message: str
    action: str


class InsightsResponse(BaseModel):
    insights: List[Insight]


class CountEntry(BaseModel):
    name: str
    count: int


class MarketTrendsResponse(BaseModel):
    jobs_by_type: List[CountEntry]
    jobs_by_experience: List[CountEntry]
    top_companies: List[CountEntry]
    skill_demand: List[CountEntry]
    total_active_jobs: int


class Settings(BaseModel):
    model_config = ConfigDict(protected_namespaces=())
    openai_api_key: Optional[str] = None
    model_name: str = "gpt-4o-mini"
    rate_limit_requests_per_minute: int = 60
    match_candidate_limit: int = 50
    log_level: str = "INFO"
