"""
Deterministic Scoring Engine

All scoring functions are deterministic - same inputs produce same outputs.
No AI/LLM is used in this module.
"""

import logging
import math
from typing import List, Sequence, Tuple

from .config import (
    WEIGHTS, NEUTRAL_SCORES, EXPERIENCE_TIERS, EXPERIENCE_FLOOR_SCORE,
    EDUCATION_LEVELS, EDUCATION_SCORES, REMOTE_LOCATION_TOKENS,
    LOCATION_SCORES, KEYWORD_AMPLIFICATION
)
from .schemas import JobPosting, MatchResult, Resume

logger = logging.getLogger(__name__)


def skill_matches(job_skill: str, resume_skills: Sequence[str]) -> bool:
    """
    Bidirectional substring test on lower-cased skills.

    "react" matches a resume skill "react.js" and vice versa. No stemming or
    synonym table is applied.
    """
    return any(rs in job_skill or job_skill in rs for rs in resume_skills)


def partition_skills(
    job_skills: Sequence[str],
    resume_skills: Sequence[str]
) -> Tuple[List[str], List[str]]:
    """
    Split the job's required skills into matching and missing.

    Both lists hold lower-cased skills in the job's order.
    """
    lower_resume_skills = [s.lower() for s in resume_skills]
    matching: List[str] = []
    missing: List[str] = []
    for skill in (s.lower() for s in job_skills):
        if skill_matches(skill, lower_resume_skills):
            matching.append(skill)
        else:
            missing.append(skill)
    return matching, missing


def calculate_skills_score(
    job_skills: Sequence[str],
    resume_skills: Sequence[str]
) -> float:
    """
    Calculate skills match score (0-100).

    Formula:
    - No required skills: 50 (unspecified requirement)
    - Otherwise: (matched_required / total_required) * 100

    Args:
        job_skills: Skills required by the job
        resume_skills: Skills extracted from the resume

    Returns:
        Score from 0-100
    """
    if not job_skills:
        logger.debug("No required skills specified, score = 50")
        return float(NEUTRAL_SCORES["no_required_skills"])

    lower_resume_skills = [s.lower() for s in resume_skills]
    matched = sum(1 for s in job_skills if skill_matches(s.lower(), lower_resume_skills))
    score = (matched / len(job_skills)) * 100
    logger.debug(f"Required skills: {matched}/{len(job_skills)} = {score:.2f}%")
    return score


def calculate_experience_score(
    required_years: float,
    candidate_years: float
) -> float:
    """
    Calculate experience match score (0-100).

    Tiered rather than linear, boundaries inclusive:
    - candidate >= required: 100
    - candidate >= 0.8 * required: 85
    - candidate >= 0.6 * required: 70
    - candidate >= 0.4 * required: 50
    - otherwise: 30

    Args:
        required_years: Minimum years required (0 means no requirement)
        candidate_years: Candidate's years of experience

    Returns:
        Score from 0-100
    """
    if required_years == 0:
        logger.debug("No experience required, score = 100")
        return float(NEUTRAL_SCORES["no_experience_required"])

    for ratio, tier_score in EXPERIENCE_TIERS:
        if candidate_years >= required_years * ratio:
            logger.debug(f"Experience: {candidate_years} vs {required_years} years "
                         f"(tier >= {ratio:.0%}), score = {tier_score}")
            return float(tier_score)

    logger.debug(f"Experience: {candidate_years} well below {required_years} years, "
                 f"score = {EXPERIENCE_FLOOR_SCORE}")
    return float(EXPERIENCE_FLOOR_SCORE)


def detect_education_level(text: str) -> int:
    """Highest degree rank mentioned in text, 0 if none."""
    text_lower = text.lower()
    level = 0
    for degree, rank in EDUCATION_LEVELS.items():
        if degree in text_lower:
            level = max(level, rank)
    return level


def calculate_education_score(
    resume_text: str,
    job_description: str
) -> float:
    """
    Calculate education match score (0-100).

    Degree levels are inferred from degree words in both texts.

    Formula:
    - Job mentions no degree: 100
    - resume_level >= required_level: 100
    - resume_level == required_level - 1: 80
    - otherwise: 50
    """
    required_level = detect_education_level(job_description)
    resume_level = detect_education_level(resume_text)

    if required_level == 0:
        logger.debug("No education requirement found, score = 100")
        return float(NEUTRAL_SCORES["no_education_required"])

    if resume_level >= required_level:
        score = EDUCATION_SCORES["meets"]
    elif resume_level >= required_level - 1:
        score = EDUCATION_SCORES["one_below"]
    else:
        score = EDUCATION_SCORES["other"]

    logger.debug(f"Education level: resume {resume_level} vs required {required_level}, score = {score}")
    return float(score)


def calculate_location_score(
    job_location: str,
    resume_text: str
) -> float:
    """
    Calculate location match score (0-100).

    Remote jobs and jobs without a location score 100. Otherwise any
    comma-separated part of the job location found in the resume text
    scores 100, and anything else 50. An empty part (as in "Mumbai,") is
    found in every resume. No geocoding is attempted.
    """
    location = job_location.strip().lower()
    if not location:
        return float(NEUTRAL_SCORES["no_location"])

    if any(token in location for token in REMOTE_LOCATION_TOKENS):
        logger.debug(f"Location '{job_location}' is remote, score = 100")
        return float(LOCATION_SCORES["match"])

    resume_lower = resume_text.lower()
    parts = [p.strip() for p in location.split(",")]
    for part in parts:
        if part in resume_lower:
            logger.debug(f"Location part '{part}' found in resume, score = 100")
            return float(LOCATION_SCORES["match"])

    logger.debug(f"Location '{job_location}' not found in resume, score = 50")
    return float(LOCATION_SCORES["unknown"])


def calculate_keyword_score(
    resume_keywords: Sequence[str],
    job_description: str
) -> float:
    """
    Calculate keyword overlap score (0-100).

    Formula:
    - No resume keywords: 50
    - Otherwise: min(100, (matched / total) * 100 * 1.5)
    """
    if not resume_keywords:
        logger.debug("No resume keywords, score = 50")
        return float(NEUTRAL_SCORES["no_keywords"])

    description = job_description.lower()
    matched = sum(1 for k in resume_keywords if k.lower() in description)
    score = min(100.0, (matched / len(resume_keywords)) * 100 * KEYWORD_AMPLIFICATION)
    logger.debug(f"Keywords: {matched}/{len(resume_keywords)} in description, score = {score:.2f}%")
    return score


def round_score(value: float) -> int:
    """Round half up and clamp to 0-100."""
    return int(min(100, max(0, math.floor(value + 0.5))))


def calculate_match_score(resume: Resume, job: JobPosting) -> MatchResult:
    """
    Calculate final match score using all components.

    Args:
        resume: Resume with its analysis
        job: Job posting to score against

    Returns:
        MatchResult with the rounded score, skill breakdown and sub-scores
    """
    analysis = resume.analysis

    skills_score = calculate_skills_score(job.required_skills, analysis.key_skills)
    experience_score = calculate_experience_score(job.experience_required, analysis.experience.years)
    education_score = calculate_education_score(resume.content, job.description)
    location_score = calculate_location_score(job.location, resume.content)
    keyword_score = calculate_keyword_score(analysis.keywords, job.description)

    final_score = (
        (WEIGHTS["skills"] * skills_score) +
        (WEIGHTS["experience"] * experience_score) +
        (WEIGHTS["education"] * education_score) +
        (WEIGHTS["location"] * location_score) +
        (WEIGHTS["keywords"] * keyword_score)
    )

    matching_skills, missing_skills = partition_skills(job.required_skills, analysis.key_skills)
    match_score = round_score(final_score)

    logger.info(f"Job {job.id or '<unsaved>'}: match score {match_score} "
                f"({len(matching_skills)}/{len(job.required_skills)} skills)")

    return MatchResult(
        match_score=match_score,
        matching_skills=matching_skills,
        missing_skills=missing_skills,
        experience_match=experience_score,
        skills_match=skills_score,
        breakdown={
            "skills": round(skills_score, 2),
            "experience": round(experience_score, 2),
            "education": round(education_score, 2),
            "location": round(location_score, 2),
            "keywords": round(keyword_score, 2),
        },
    )
