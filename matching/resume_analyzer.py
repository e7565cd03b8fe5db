"""
Resume Analysis Providers

Two interchangeable analyzers produce a ResumeAnalysis from raw resume text:
- LLMResumeAnalyzer: PhiData agent over an OpenAI chat model
- HeuristicResumeAnalyzer: keyword heuristics, no network

build_resume_analyzer() picks one when the application starts.
"""

import logging
import random
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from phi.agent import Agent

from .config import (
    LLM_CONFIG, HEURISTIC_SKILLS, GENERIC_SKILLS, GENERIC_KEYWORDS,
    DEFAULT_SKILL_GAPS, HEURISTIC_SCORING
)
from .exceptions import AnalysisProviderError
from .llm import build_agent, run_json_agent
from .schemas import ResumeAnalysis, utc_now

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"\d{3}[-.\s]?\d{3}[-.\s]?\d{4}")
YEARS_PATTERN = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)", re.IGNORECASE)


class ResumeAnalyzer(ABC):
    """Turns raw resume text into a ResumeAnalysis."""

    name = "base"

    @abstractmethod
    def analyze(self, resume_text: str) -> ResumeAnalysis:
        ...

    @abstractmethod
    def suggest_improvements(self, resume_text: str, target_job: Optional[str] = None) -> List[str]:
        ...


AGENT_INSTRUCTIONS = [
    "You are an expert resume reviewer and career coach.",
    "Return ONLY valid JSON, no markdown or explanations.",
    "Base every statement on the resume text you are given.",
]

ANALYSIS_PROMPT = """Analyze the following resume and provide a comprehensive evaluation in JSON format.

Return an object with these keys:
- ats_score: number 0-100
- overall_match: number 0-100
- interview_probability: number 0-100
- strengths: array of 4-5 specific strengths
- improvements: array of 4-5 actionable improvements
- skill_gaps: array of objects {{"skill": ..., "importance": "High|Medium|Low"}}
- key_skills: array of extracted technical and soft skills
- experience: object {{"years": estimated years, "industries": [...], "roles": [...]}}
- keywords: array of ATS-friendly keywords
- formatting: object {{"score": number 0-100, "issues": [formatting problems]}}

Resume:
{resume}
"""

IMPROVEMENT_PROMPT = """Suggest 3-5 specific, actionable improvements for this resume.
If a target job is given, focus on closing the gap to that job.
Return JSON of the form {{"improvements": ["..."]}}.

Resume:
{resume}

Target job:
{target_job}
"""


class LLMResumeAnalyzer(ResumeAnalyzer):
    """Resume analysis through a PhiData agent."""

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
            name="Resume Analyst",
            role="Evaluate resumes and extract skills, experience and keywords",
            instructions=AGENT_INSTRUCTIONS,
            model_name=self.model_name,
            api_key=api_key,
        )

    def analyze(self, resume_text: str) -> ResumeAnalysis:
        """
        Analyze a resume with the LLM.

        Only the first LLM_CONFIG["max_resume_chars"] characters are sent.

        Raises:
            AnalysisProviderError: If the model fails or returns unusable data
        """
        logger.info(f"Analyzing resume with {self.model_name} ({len(resume_text)} chars)")
        prompt = ANALYSIS_PROMPT.format(resume=resume_text[:LLM_CONFIG["max_resume_chars"]])

        try:
            data = run_json_agent(self.agent, prompt, self.max_retries)
            data["analyzed_at"] = utc_now()
            data["model_used"] = self.model_name
            analysis = ResumeAnalysis.model_validate(data)
        except ValueError as e:
            logger.error(f"Resume analysis failed: {e}", exc_info=True)
            raise AnalysisProviderError(f"Resume analysis failed: {e}", provider=self.name) from e

        logger.info(f"Analysis complete - ATS score: {analysis.ats_score}")
        return analysis

    def suggest_improvements(self, resume_text: str, target_job: Optional[str] = None) -> List[str]:
        prompt = IMPROVEMENT_PROMPT.format(
            resume=resume_text[:LLM_CONFIG["max_resume_chars"]],
            target_job=target_job or "Not specified",
        )

        try:
            data = run_json_agent(self.agent, prompt, self.max_retries)
        except ValueError as e:
            raise AnalysisProviderError(f"Improvement suggestions failed: {e}", provider=self.name) from e

        improvements = data.get("improvements")
        if not isinstance(improvements, list):
            raise AnalysisProviderError("LLM response has no improvements list", provider=self.name)
        return [str(item) for item in improvements]


class HeuristicResumeAnalyzer(ResumeAnalyzer):
    """
    Rule-based resume analysis.

    overall_match and interview_probability carry random jitter so repeated
    analyses do not look canned; pass a seeded Random to make them repeatable.
    """

    name = "heuristic"
    model_used = "heuristic-analyzer-v2"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @staticmethod
    def find_skills(text: str) -> List[str]:
        text_lower = text.lower()
        return [skill for skill in HEURISTIC_SKILLS if skill.lower() in text_lower]

    @staticmethod
    def estimate_years(text: str) -> int:
        years = [int(m) for m in YEARS_PATTERN.findall(text)]
        return max(years) if years else HEURISTIC_SCORING["default_years"]

    @staticmethod
    def has_education(text: str) -> bool:
        text_lower = text.lower()
        return any(token in text_lower for token in ("bachelor", "master", "b.tech", "degree"))

    def analyze(self, resume_text: str) -> ResumeAnalysis:
        text_lower = resume_text.lower()
        has_email = "@" in resume_text
        has_phone = bool(PHONE_PATTERN.search(resume_text))
        has_education = self.has_education(resume_text)
        found_skills = self.find_skills(resume_text)
        years = self.estimate_years(resume_text)
        long_resume = len(resume_text) > HEURISTIC_SCORING["length_threshold"]

        scoring = HEURISTIC_SCORING
        ats_score = min(
            scoring["base"]
            + min(len(found_skills) * scoring["per_skill"], scoring["max_skill_bonus"])
            + (scoring["education_bonus"] if has_education else 0)
            + (scoring["contact_bonus"] if has_email and has_phone else 0)
            + (scoring["length_bonus"] if long_resume else 0),
            100,
        )

        strengths = [
            f"Strong technical skill set with {len(found_skills)} technologies"
            if len(found_skills) > 5 else "Good foundation of technical skills",
            "Relevant educational background from recognized institution"
            if has_education else "Practical experience demonstrated",
            "Comprehensive work experience with detailed descriptions"
            if long_resume else "Clear and concise presentation style",
            "Complete contact information provided"
            if has_email and has_phone else "Basic contact details included",
        ]

        improvements = [
            "Expand technical skills section with more relevant technologies"
            if len(found_skills) < 5 else None,
            'Add quantifiable achievements with metrics (e.g., "Increased performance by 30%")'
            if "achieved" not in text_lower and "increased" not in text_lower else None,
            "Provide more details about projects and responsibilities"
            if len(resume_text) < 1500 else None,
            "Highlight leadership and project management experience"
            if "led" not in text_lower and "managed" not in text_lower else None,
            "Optimize keyword density for better ATS compatibility",
            "Consider adding relevant certifications"
            if "certification" not in text_lower else None,
        ]

        if "senior" in text_lower:
            roles = ["Senior Developer", "Engineer"]
        elif "lead" in text_lower:
            roles = ["Lead Developer", "Tech Lead"]
        else:
            roles = ["Software Engineer", "Developer"]

        data: Dict[str, Any] = {
            "ats_score": ats_score,
            "overall_match": min(ats_score + self.rng.randint(0, 9) - 5, 100),
            "interview_probability": min(ats_score - self.rng.randint(0, 14) + 5,
                                         scoring["max_interview_probability"]),
            "strengths": strengths,
            "improvements": [item for item in improvements if item][:5],
            "skill_gaps": DEFAULT_SKILL_GAPS[:self.rng.randint(4, 5)],
            "key_skills": found_skills[:12] if found_skills else list(GENERIC_SKILLS),
            "experience": {
                "years": years,
                "industries": ["Technology", "Software Development"],
                "roles": roles,
            },
            "keywords": found_skills if found_skills else list(GENERIC_KEYWORDS),
            "formatting": {
                "score": 90 if has_email and has_phone and has_education else 75,
                "issues": [issue for issue in (
                    None if has_email else "Email address not clearly visible",
                    None if has_phone else "Phone number not found",
                    None if has_education else "Education section could be more prominent",
                ) if issue],
            },
            "analyzed_at": utc_now(),
            "model_used": self.model_used,
        }

        analysis = ResumeAnalysis.model_validate(data)
        logger.info(f"Heuristic analysis complete - ATS score: {analysis.ats_score}, "
                    f"{len(found_skills)} skills found")
        return analysis

    def suggest_improvements(self, resume_text: str, target_job: Optional[str] = None) -> List[str]:
        suggestions = list(self.analyze(resume_text).improvements)
        if target_job:
            have = {s.lower() for s in self.find_skills(resume_text)}
            wanted = [s for s in self.find_skills(target_job) if s.lower() not in have]
            for skill in wanted[:3]:
                suggestions.insert(0, f"Add experience with {skill} to match the target role")
        return suggestions[:5]


def build_resume_analyzer(
    api_key: Optional[str] = None,
    model_name: Optional[str] = None,
    rng: Optional[random.Random] = None
) -> ResumeAnalyzer:
    """Use the LLM analyzer when an OpenAI key is configured, else heuristics."""
    if api_key:
        logger.info(f"Using LLM resume analyzer ({model_name or LLM_CONFIG['model']})")
        return LLMResumeAnalyzer(model_name=model_name, api_key=api_key)
    logger.warning("OpenAI API key not found, using heuristic resume analyzer")
    return HeuristicResumeAnalyzer(rng=rng)
