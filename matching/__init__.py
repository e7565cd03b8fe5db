"""
Deterministic Job-Resume Matching System

This package ranks job postings against an analyzed resume:
1. Resume analysis (PhiData + OpenAI, or local heuristics)
2. Deterministic weighted scoring (skills, experience, education,
   location, keywords)

Usage:
    from matching import match_jobs_to_resume

    matches = match_jobs_to_resume(resume, jobs, limit=10)
    print(f"Top match: {matches[0]['match_score']}%")
"""

from .config import WEIGHTS
from .exceptions import AnalysisProviderError, MatchingError, NotFoundError
from .fit_analyzer import JobFitAnalyzer, LLMJobFitAnalyzer, ScoringJobFitAnalyzer, build_fit_analyzer
from .matcher import analyze_job_fit, match_jobs_to_resume
from .resume_analyzer import (
    HeuristicResumeAnalyzer,
    LLMResumeAnalyzer,
    ResumeAnalyzer,
    build_resume_analyzer,
)
from .schemas import FitAnalysis, JobPosting, MatchResult, Resume, ResumeAnalysis
from .scoring_engine import calculate_match_score

__all__ = [
    "WEIGHTS",
    "AnalysisProviderError",
    "MatchingError",
    "NotFoundError",
    "JobFitAnalyzer",
    "LLMJobFitAnalyzer",
    "ScoringJobFitAnalyzer",
    "build_fit_analyzer",
    "analyze_job_fit",
    "match_jobs_to_resume",
    "HeuristicResumeAnalyzer",
    "LLMResumeAnalyzer",
    "ResumeAnalyzer",
    "build_resume_analyzer",
    "FitAnalysis",
    "JobPosting",
    "MatchResult",
    "Resume",
    "ResumeAnalysis",
    "calculate_match_score",
]
__version__ = "1.0.0"
