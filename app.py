from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from pathlib import Path

import analytics
from matching import (
    AnalysisProviderError,
    JobFitAnalyzer,
    MatchingError,
    NotFoundError,
    ResumeAnalyzer,
    analyze_job_fit,
    build_fit_analyzer,
    build_resume_analyzer,
    match_jobs_to_resume,
)
from matching.config import MATCHING_LIMITS
from matching.schemas import Resume
from models import (
    AnalyzeFitRequest,
    AnalyzeFitResponse,
    AnalyzeResumeRequest,
    AnalyzeResumeResponse,
    BulkImportRequest,
    BulkImportResponse,
    DashboardResponse,
    ImproveResumeRequest,
    ImproveResumeResponse,
    InsightsResponse,
    JobResponse,
    JobSearchResponse,
    MarketTrendsResponse,
    MatchJobsRequest,
    MatchJobsResponse,
    Pagination,
    RecommendationsResponse,
    ResumeHistoryResponse,
    ResumePerformanceResponse,
    ResumeResponse,
    ResumeSummary,
    Settings,
    SkillTrendsResponse,
)
from storage import JobStore, ResumeStore, get_job_store, get_resume_store


# Load environment from project root .env if present
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

logger = logging.getLogger(__name__)

STARTED_AT = time.time()


def get_settings() -> Settings:
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        model_name=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        rate_limit_requests_per_minute=int(os.getenv("RATE_LIMIT_RPM", "60")),
        match_candidate_limit=int(os.getenv("MATCH_CANDIDATE_LIMIT", str(MATCHING_LIMITS["candidate_limit"]))),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


logging.basicConfig(
    level=get_settings().log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = FastAPI(title="Resume Job Matcher API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# In-memory stores
LAST_REQUESTS_BY_IP: Dict[str, List[float]] = {}
_resume_analyzer: Optional[ResumeAnalyzer] = None
_fit_analyzer: Optional[JobFitAnalyzer] = None


def get_resume_analyzer(settings: Settings = Depends(get_settings)) -> ResumeAnalyzer:
    global _resume_analyzer
    if _resume_analyzer is None:
        _resume_analyzer = build_resume_analyzer(settings.openai_api_key, settings.model_name)
    return _resume_analyzer


def get_fit_analyzer(settings: Settings = Depends(get_settings)) -> JobFitAnalyzer:
    global _fit_analyzer
    if _fit_analyzer is None:
        _fit_analyzer = build_fit_analyzer(settings.openai_api_key, settings.model_name)
    return _fit_analyzer


async def rate_limit(request: Request, settings: Settings = Depends(get_settings)):
    ip = request.client.host if request.client else "unknown"
    window = 60.0
    max_req = settings.rate_limit_requests_per_minute
    now = time.time()
    bucket = LAST_REQUESTS_BY_IP.setdefault(ip, [])
    # prune
    while bucket and now - bucket[0] > window:
        bucket.pop(0)
    if len(bucket) >= max_req:
        raise HTTPException(status_code=429, detail="Rate limit exceeded")
    bucket.append(now)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(AnalysisProviderError)
async def provider_error_handler(request: Request, exc: AnalysisProviderError):
    logger.error(f"Analysis provider '{exc.provider}' failed on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": f"Analysis service unavailable: {exc}"})


@app.exception_handler(MatchingError)
async def matching_error_handler(request: Request, exc: MatchingError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/")
async def root():
    return {"status": "ok", "version": "1.0.0"}


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.time() - STARTED_AT, 2),
    }


api = APIRouter(prefix="/api", dependencies=[Depends(rate_limit)])


# Resume endpoints

@api.post("/resume/analyze", response_model=AnalyzeResumeResponse)
def analyze_resume(
    request: AnalyzeResumeRequest,
    analyzer: ResumeAnalyzer = Depends(get_resume_analyzer),
    resumes: ResumeStore = Depends(get_resume_store),
):
    """
    Analyze resume text and store it.

    Request Body:
        content: Plain-text resume
        file_name: Display name

    Returns:
        The new resume id and its analysis
    """
    analysis = analyzer.analyze(request.content)
    resume = resumes.add(Resume(file_name=request.file_name, content=request.content, analysis=analysis))
    logger.info(f"Stored resume {resume.id} (ATS {analysis.ats_score})")
    return AnalyzeResumeResponse(resume_id=resume.id, analysis=analysis)


@api.get("/resume/history", response_model=ResumeHistoryResponse)
def resume_history(resumes: ResumeStore = Depends(get_resume_store)):
    return ResumeHistoryResponse(resumes=[
        ResumeSummary(id=r.id, file_name=r.file_name, uploaded_at=r.uploaded_at, analysis=r.analysis)
        for r in resumes.list(limit=10)
    ])


@api.get("/resume/{resume_id}", response_model=ResumeResponse)
def get_resume(resume_id: str, resumes: ResumeStore = Depends(get_resume_store)):
    return ResumeResponse(resume=resumes.get(resume_id))


@api.delete("/resume/{resume_id}")
def delete_resume(resume_id: str, resumes: ResumeStore = Depends(get_resume_store)):
    resumes.delete(resume_id)
    return {"success": True, "message": "Resume deleted successfully"}


@api.post("/resume/{resume_id}/improve", response_model=ImproveResumeResponse)
def improve_resume(
    resume_id: str,
    request: ImproveResumeRequest,
    analyzer: ResumeAnalyzer = Depends(get_resume_analyzer),
    resumes: ResumeStore = Depends(get_resume_store),
):
    resume = resumes.get(resume_id)
    return ImproveResumeResponse(improvements=analyzer.suggest_improvements(resume.content, request.target_job))


# Job endpoints

@api.get("/jobs/search", response_model=JobSearchResponse)
def search_jobs(
    keywords: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[str] = None,
    experience_level: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    jobs: JobStore = Depends(get_job_store),
):
    found, total = jobs.search(keywords, location, job_type, experience_level, page, limit)
    logger.info(f"Job search found {total} jobs (keywords={keywords!r}, location={location!r})")
    return JobSearchResponse(
        jobs=found,
        pagination=Pagination(
            current=page,
            total=-(-total // limit),
            count=len(found),
            total_jobs=total,
        ),
    )


@api.post("/jobs/match", response_model=MatchJobsResponse)
def match_jobs(
    request: MatchJobsRequest,
    settings: Settings = Depends(get_settings),
    jobs: JobStore = Depends(get_job_store),
    resumes: ResumeStore = Depends(get_resume_store),
):
    resume = resumes.get(request.resume_id)
    candidates = jobs.list_active(settings.match_candidate_limit)
    logger.info(f"Matching resume {resume.id} against {len(candidates)} active jobs")

    matches = match_jobs_to_resume(resume, candidates, request.limit)
    return MatchJobsResponse(matches=matches, total_evaluated=len(candidates))


@api.post("/jobs/bulk-import", response_model=BulkImportResponse, status_code=201)
def bulk_import_jobs(request: BulkImportRequest, jobs: JobStore = Depends(get_job_store)):
    try:
        imported = jobs.bulk_import(request.jobs)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid jobs: {e}")
    return BulkImportResponse(
        count=len(imported),
        message=f"Successfully imported {len(imported)} jobs",
    )


@api.get("/jobs/recommendations/{resume_id}", response_model=RecommendationsResponse)
def job_recommendations(
    resume_id: str,
    jobs: JobStore = Depends(get_job_store),
    resumes: ResumeStore = Depends(get_resume_store),
):
    resume = resumes.get(resume_id)
    candidates = jobs.recommend_for_skills(
        resume.analysis.key_skills, MATCHING_LIMITS["recommendation_candidates"]
    )
    return RecommendationsResponse(
        recommendations=match_jobs_to_resume(resume, candidates, MATCHING_LIMITS["default_limit"])
    )


@api.get("/jobs/{job_id}", response_model=JobResponse)
def get_job(job_id: str, jobs: JobStore = Depends(get_job_store)):
    return JobResponse(job=jobs.get(job_id))


@api.post("/jobs/{job_id}/analyze-fit", response_model=AnalyzeFitResponse)
def job_fit(
    job_id: str,
    request: AnalyzeFitRequest,
    fit_analyzer: JobFitAnalyzer = Depends(get_fit_analyzer),
    jobs: JobStore = Depends(get_job_store),
    resumes: ResumeStore = Depends(get_resume_store),
):
    job = jobs.get(job_id)
    resume = resumes.get(request.resume_id)
    return AnalyzeFitResponse(fit_analysis=analyze_job_fit(resume, job, fit_analyzer))


# Analytics endpoints

@api.get("/analytics/dashboard", response_model=DashboardResponse)
def analytics_dashboard(resumes: ResumeStore = Depends(get_resume_store)):
    return DashboardResponse(stats=analytics.dashboard_stats(resumes.list(limit=None)))


@api.get("/analytics/resume-performance", response_model=ResumePerformanceResponse)
def analytics_resume_performance(resumes: ResumeStore = Depends(get_resume_store)):
    return ResumePerformanceResponse(performance_data=analytics.resume_performance(resumes.list(limit=None)))


@api.get("/analytics/skill-trends", response_model=SkillTrendsResponse)
def analytics_skill_trends(resumes: ResumeStore = Depends(get_resume_store)):
    return SkillTrendsResponse(**analytics.skill_trends(resumes.list(limit=None)))


@api.get("/analytics/improvement-insights", response_model=InsightsResponse)
def analytics_improvement_insights(resumes: ResumeStore = Depends(get_resume_store)):
    latest = resumes.list(limit=1)
    if not latest:
        raise HTTPException(status_code=404, detail="No resume found")
    return InsightsResponse(insights=analytics.improvement_insights(latest[0]))


@api.get("/analytics/market-trends", response_model=MarketTrendsResponse)
def analytics_market_trends(jobs: JobStore = Depends(get_job_store)):
    return MarketTrendsResponse(**analytics.market_trends(jobs.list_active(limit=None)))


app.include_router(api)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
