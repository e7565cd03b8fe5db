"""
Single-job fit analysis.

The deep fit check for one resume and one job is delegated to a
JobFitAnalyzer. In production this is an LLM; the deterministic scorer can
stand in when no model is configured.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from phi.agent import Agent

from .config import LLM_CONFIG
from .exceptions import AnalysisProviderError
from .llm import build_agent, run_json_agent
from .schemas import FitAnalysis, JobPosting, Resume
from .scoring_engine import calculate_match_score

logger = logging.getLogger(__name__)

# (minimum score, verdict), checked in order
FIT_VERDICTS = [
    (70, "Excellent fit"),
    (50, "Good fit"),
    (30, "Weak fit"),
    (0, "Poor fit"),
]


def fit_verdict(score: int) -> str:
    for threshold, verdict in FIT_VERDICTS:
        if score >= threshold:
            return verdict
    return FIT_VERDICTS[-1][1]


def describe_job(job: JobPosting) -> str:
    return (
        f"Title: {job.title}\n"
        f"Company: {job.company}\n"
        f"Description: {job.description}\n"
        f"Required Skills: {', '.join(job.required_skills)}\n"
        f"Experience Required: {job.experience_required:g} years"
    )


class JobFitAnalyzer(ABC):
    """Judges how well one resume fits one job."""

    name = "base"

    @abstractmethod
    def analyze_fit(self, resume: Resume, job: JobPosting) -> FitAnalysis:
        ...


class ScoringJobFitAnalyzer(JobFitAnalyzer):
    """Fit analysis derived from the weighted scoring engine."""

    name = "scoring-engine"

    def analyze_fit(self, resume: Resume, job: JobPosting) -> FitAnalysis:
        result = calculate_match_score(resume, job)

        total = len(job.required_skills)
        met = len(result.matching_skills)
        if job.experience_required > 0:
            total += 1
            if resume.analysis.experience.years >= job.experience_required:
                met += 1

        reasoning = (
            f"Matches {len(result.matching_skills)} of {len(job.required_skills)} required skills; "
            f"experience score {result.experience_match:.0f}, "
            f"education score {result.breakdown['education']:.0f}, "
            f"location score {result.breakdown['location']:.0f}."
        )
        if result.missing_skills:
            reasoning += f" Missing: {', '.join(result.missing_skills)}."

        return FitAnalysis(
            match_score=result.match_score,
            key_matches=result.matching_skills,
            missing_skills=result.missing_skills,
            requirements_met=met,
            total_requirements=total,
            reasoning=reasoning,
            recommendation=fit_verdict(result.match_score),
            analyzed_by=self.name,
        )


FIT_INSTRUCTIONS = [
    "You are a precise job matching evaluator. Analyze ONLY the information provided.",
    "",
    "SCORING METHODOLOGY:",
    "1. Skills Match (40%): Count how many job-required skills the candidate has",
    "2. Experience Match (25%): Check if candidate meets minimum years required",
    "3. Education (15%): Compare degree level asked for with the candidate's",
    "4. Location and keywords (20%): Location fit and domain vocabulary overlap",
    "",
    "CRITICAL RULES TO PREVENT HALLUCINATION:",
    "- Do NOT invent skills the candidate doesn't have",
    "- Do NOT assume information not in the data",
    "",
    "OUTPUT FORMAT (MUST be valid JSON, no markdown):",
    "{",
    '  "match_score": 65,',
    '  "key_matches": ["Python", "React"],',
    '  "missing_skills": ["Kubernetes"],',
    '  "requirements_met": 4,',
    '  "total_requirements": 6,',
    '  "reasoning": "Short explanation of the score",',
    '  "recommendation": "Good fit"',
    "}",
    "",
    "SCORING GUIDELINES:",
    "- 0-30: Poor fit (missing most key skills)",
    "- 30-50: Weak fit (some transferable skills)",
    "- 50-70: Good fit (solid match with minor gaps)",
    "- 70-100: Excellent fit (strong alignment)",
]


class LLMJobFitAnalyzer(JobFitAnalyzer):
    """Fit analysis through a PhiData agent."""

    name = "openai"

    def __init__(
        self,
        model_name: Optional[str] = None,
        api_key: Optional[str] = None,
        agent: Optional[Agent] = None,
        max_retries: Optional[int] = None
    ):
        self.model_name = model_name or LLM_CONFIG["model"]
        self.max_retries = max_retries or LLM_CONFIG["max_retries"]
        self.agent = agent or build_agent(
            name="Job Fit Scorer",
            role="Evaluate candidate-job match accurately based on provided data only",
            instructions=FIT_INSTRUCTIONS,
            model_name=self.model_name,
            api_key=api_key,
        )

    def analyze_fit(self, resume: Resume, job: JobPosting) -> FitAnalysis:
        """
        Raises:
            AnalysisProviderError: If the model fails or returns unusable data
        """
        prompt = (
            f"Resume:\n{resume.content[:LLM_CONFIG['max_resume_chars']]}\n\n"
            f"Job:\n{describe_job(job)}"
        )

        try:
            data = run_json_agent(self.agent, prompt, self.max_retries)
            data["analyzed_by"] = self.model_name
            analysis = FitAnalysis.model_validate(data)
        except ValueError as e:
            logger.error(f"Job fit analysis failed for job {job.id}: {e}", exc_info=True)
            raise AnalysisProviderError(f"Job fit analysis failed: {e}", provider=self.name) from e

        if not analysis.recommendation:
            analysis = analysis.model_copy(update={"recommendation": fit_verdict(analysis.match_score)})

        logger.info(f"Fit analysis for job {job.id}: {analysis.match_score}% ({analysis.recommendation})")
        return analysis


def build_fit_analyzer(
    api_key: Optional[str] = None,
    model_name: Optional[str] = None
) -> JobFitAnalyzer:
    """Use the LLM fit analyzer when an OpenAI key is configured."""
    if api_key:
        return LLMJobFitAnalyzer(model_name=model_name, api_key=api_key)
    logger.warning("OpenAI API key not found, fit analysis uses the scoring engine")
    return ScoringJobFitAnalyzer()
