"""
Main Matcher Module

Orchestrates matching one resume against many jobs:
1. Validate the resume and each job into typed records
2. Calculate the deterministic match score per job
3. Return ranked results with skill breakdown
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from .config import MATCHING_LIMITS
from .exceptions import MatchingError
from .fit_analyzer import JobFitAnalyzer, ScoringJobFitAnalyzer
from .schemas import FitAnalysis, JobPosting, Resume
from .scoring_engine import calculate_match_score

logger = logging.getLogger(__name__)

ResumeInput = Union[Resume, Mapping[str, Any]]
JobInput = Union[JobPosting, Mapping[str, Any]]


def coerce_resume(resume: ResumeInput) -> Resume:
    """Validate a resume record, raising MatchingError if it is malformed."""
    if isinstance(resume, Resume):
        return resume
    try:
        return Resume.model_validate(resume)
    except ValidationError as e:
        raise MatchingError(f"Invalid resume: {e}") from e


def coerce_job(job: JobInput) -> JobPosting:
    if isinstance(job, JobPosting):
        return job
    return JobPosting.model_validate(job)


def score_job(resume: Resume, job: JobInput) -> Dict[str, Any]:
    """Score one job and shape it as a ranking entry."""
    posting = coerce_job(job)
    result = calculate_match_score(resume, posting)
    return {
        "job": posting.summary(),
        "match_score": result.match_score,
        "matching_skills": result.matching_skills,
        "missing_skills": result.missing_skills,
        "experience_match": result.experience_match,
        "skills_match": result.skills_match,
    }


def match_jobs_to_resume(
    resume: ResumeInput,
    jobs: Iterable[JobInput],
    limit: int = MATCHING_LIMITS["default_limit"]
) -> List[Dict[str, Any]]:
    """
    Rank jobs for a resume.

    Each job is scored independently. A job that fails validation or scoring
    is logged and left out; the rest are still ranked.

    Args:
        resume: Resume with analysis, as a model or mapping
        jobs: Candidate jobs, already filtered and bounded by the caller
        limit: Maximum number of results

    Returns:
        Ranking entries sorted by match_score (highest first, ties keep
        input order), at most `limit` long

    Raises:
        MatchingError: If the resume or limit is invalid
        TypeError: If jobs is not iterable

    Example:
        >>> matches = match_jobs_to_resume(resume, jobs, limit=5)
        >>> for i, match in enumerate(matches, 1):
        >>>     print(f"#{i}: {match['job']['title']} {match['match_score']}%")
    """
    if limit < 0:
        raise MatchingError(f"limit must be non-negative, got {limit}")

    candidate = coerce_resume(resume)

    matches = []
    evaluated = 0
    for i, job in enumerate(jobs):
        evaluated += 1
        try:
            matches.append(score_job(candidate, job))
        except Exception as e:
            job_id = job.get("id") if isinstance(job, Mapping) else getattr(job, "id", None)
            logger.warning(f"Skipping job {i} ({job_id}): {e}")

    matches.sort(key=lambda m: m["match_score"], reverse=True)
    top = matches[:limit]

    logger.info(f"Matched {len(matches)}/{evaluated} jobs, returning top {len(top)}")
    if top:
        logger.info(f"Top match: {top[0]['match_score']}%")

    return top


def analyze_job_fit(
    resume: ResumeInput,
    job: JobInput,
    fit_analyzer: Optional[JobFitAnalyzer] = None
) -> FitAnalysis:
    """
    Deep fit analysis for a single resume-job pair.

    Defers to a JobFitAnalyzer (an LLM in production). Without one, the
    deterministic scorer stands in.

    Raises:
        MatchingError: If the resume or job is malformed
        AnalysisProviderError: If the fit analyzer fails
    """
    candidate = coerce_resume(resume)
    try:
        posting = coerce_job(job)
    except ValidationError as e:
        raise MatchingError(f"Invalid job: {e}") from e

    analyzer = fit_analyzer or ScoringJobFitAnalyzer()
    logger.info(f"Analyzing fit for job {posting.id} with {type(analyzer).__name__}")
    return analyzer.analyze_fit(candidate, posting)
