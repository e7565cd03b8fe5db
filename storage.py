"""
In-memory storage for resumes and job postings.

Stands in for the document database: filtering active jobs, free-text
search, pagination and recommendation candidates happen here, never in the
scorer.
"""
from __future__ import annotations

import logging
import re
import threading
import uuid
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from matching.exceptions import NotFoundError
from matching.schemas import JobPosting, Resume, utc_now

logger = logging.getLogger(__name__)

JobRecord = Union[JobPosting, Mapping[str, Any]]


def new_id() -> str:
    return uuid.uuid4().hex


SAMPLE_JOBS: List[Dict[str, Any]] = [
    {
        "title": "Full Stack Developer",
        "company": "Tech Innovations Inc.",
        "location": "Bengaluru, India",
        "experience_level": "Mid",
        "salary": {"min": 800000, "max": 1500000, "currency": "INR"},
        "description": "We are looking for a Full Stack Developer with experience in React, Node.js, and MongoDB. "
                       "You will work on building scalable web applications and APIs.",
        "required_skills": ["JavaScript", "React", "Node.js", "MongoDB", "Express.js", "REST API"],
        "preferred_skills": ["TypeScript", "Docker", "AWS", "Redis"],
        "experience_required": 2,
        "benefits": ["Health Insurance", "Work from Home", "Flexible Hours"],
        "applicants": 45,
    },
    {
        "title": "Software Engineer - Backend",
        "company": "CloudScale Systems",
        "location": "Bengaluru, India",
        "experience_level": "Mid",
        "salary": {"min": 1000000, "max": 1800000, "currency": "INR"},
        "description": "Join our backend team to build high-performance microservices using Node.js, Python, "
                       "and cloud platforms.",
        "required_skills": ["Node.js", "Python", "MongoDB", "PostgreSQL", "Docker", "Kubernetes"],
        "preferred_skills": ["AWS", "Redis", "Microservices", "CI/CD"],
        "experience_required": 3,
        "benefits": ["Health Insurance", "Stock Options", "Learning Budget"],
        "applicants": 67,
    },
    {
        "title": "Frontend Developer - React",
        "company": "DesignHub Technologies",
        "location": "Remote",
        "experience_level": "Entry",
        "salary": {"min": 600000, "max": 1000000, "currency": "INR"},
        "description": "Create beautiful, responsive web applications using React and modern CSS frameworks.",
        "required_skills": ["React", "JavaScript", "HTML5", "CSS3", "Tailwind CSS"],
        "preferred_skills": ["TypeScript", "Next.js", "Redux", "Git"],
        "experience_required": 1,
        "benefits": ["Remote Work", "Flexible Hours", "Health Insurance"],
        "applicants": 123,
    },
    {
        "title": "MERN Stack Developer",
        "company": "StartupLabs",
        "location": "Hyderabad, India",
        "experience_level": "Mid",
        "salary": {"min": 900000, "max": 1600000, "currency": "INR"},
        "description": "Build cutting-edge applications using MongoDB, Express, React, and Node.js.",
        "required_skills": ["MongoDB", "Express.js", "React", "Node.js", "JavaScript", "REST API"],
        "preferred_skills": ["TypeScript", "Redux", "Docker", "AWS", "CI/CD"],
        "experience_required": 2,
        "benefits": ["Health Insurance", "Stock Options", "Team Outings"],
        "applicants": 89,
    },
    {
        "title": "Junior Software Developer",
        "company": "NextGen Solutions",
        "location": "Pune, India",
        "experience_level": "Entry",
        "salary": {"min": 500000, "max": 800000, "currency": "INR"},
        "description": "Start your career with us! Looking for fresh graduates with strong programming fundamentals.",
        "required_skills": ["JavaScript", "HTML", "CSS", "Git", "Problem Solving"],
        "preferred_skills": ["React", "Node.js", "MongoDB", "SQL"],
        "experience_required": 0,
        "benefits": ["Training Programs", "Mentorship", "Health Insurance"],
        "applicants": 234,
    },
    {
        "title": "DevOps Engineer",
        "company": "CloudOps Inc.",
        "location": "Bengaluru, India",
        "experience_level": "Senior",
        "salary": {"min": 1500000, "max": 2500000, "currency": "INR"},
        "description": "Manage cloud infrastructure, CI/CD pipelines, and automation.",
        "required_skills": ["Docker", "Kubernetes", "AWS", "CI/CD", "Jenkins", "Linux"],
        "preferred_skills": ["Terraform", "Ansible", "Python", "Monitoring Tools"],
        "experience_required": 4,
        "benefits": ["Health Insurance", "Stock Options", "Remote Work"],
        "applicants": 56,
    },
    {
        "title": "AI/ML Engineer",
        "company": "DataMinds AI",
        "location": "Remote",
        "experience_level": "Mid",
        "salary": {"min": 1200000, "max": 2000000, "currency": "INR"},
        "description": "Build intelligent applications using machine learning and NLP.",
        "required_skills": ["Python", "TensorFlow", "PyTorch", "Machine Learning", "NLP"],
        "preferred_skills": ["Hugging Face", "LangChain", "OpenAI API", "Docker"],
        "experience_required": 2,
        "benefits": ["Remote Work", "Learning Budget", "Conferences"],
        "applicants": 78,
    },
    {
        "title": "React Native Developer",
        "company": "MobileFirst Apps",
        "location": "Bengaluru, India",
        "experience_level": "Mid",
        "salary": {"min": 1000000, "max": 1700000, "currency": "INR"},
        "description": "Develop cross-platform mobile applications using React Native.",
        "required_skills": ["React Native", "JavaScript", "TypeScript", "Mobile Development"],
        "preferred_skills": ["Redux", "Firebase", "Push Notifications", "App Store Deployment"],
        "experience_required": 2,
        "benefits": ["Health Insurance", "Flexible Hours", "Device Allowance"],
        "applicants": 92,
    },
    {
        "title": "Backend Developer - Python",
        "company": "DataFlow Systems",
        "location": "Mumbai, India",
        "experience_level": "Mid",
        "salary": {"min": 1100000, "max": 1900000, "currency": "INR"},
        "description": "Build robust backend systems using Python, Django/Flask, and modern databases.",
        "required_skills": ["Python", "Django", "Flask", "PostgreSQL", "REST API"],
        "preferred_skills": ["Redis", "Celery", "Docker", "AWS", "Microservices"],
        "experience_required": 3,
        "benefits": ["Health Insurance", "Work from Home", "Learning Budget"],
        "applicants": 67,
    },
    {
        "title": "Full Stack Java Developer",
        "company": "Enterprise Solutions Ltd.",
        "location": "Bengaluru, India",
        "experience_level": "Senior",
        "salary": {"min": 1400000, "max": 2200000, "currency": "INR"},
        "description": "Experienced Java developer needed for enterprise applications with Spring Boot "
                       "and Hibernate.",
        "required_skills": ["Java", "Spring Boot", "Hibernate", "Microservices", "SQL", "REST API"],
        "preferred_skills": ["Docker", "Kubernetes", "AWS", "Redis", "Kafka"],
        "experience_required": 5,
        "benefits": ["Health Insurance", "Stock Options", "Retirement Plan"],
        "applicants": 45,
    },
]


class JobStore:
    """Job postings kept in memory, newest first."""

    def __init__(self, jobs: Optional[Iterable[JobRecord]] = None):
        self._jobs: Dict[str, JobPosting] = {}
        self._lock = threading.Lock()
        for job in jobs or []:
            self.add(job)

    def __len__(self) -> int:
        return len(self._jobs)

    @staticmethod
    def _prepare(job: JobRecord) -> JobPosting:
        posting = job if isinstance(job, JobPosting) else JobPosting.model_validate(job)
        if not posting.id:
            posting = posting.model_copy(update={"id": new_id()})
        return posting

    def add(self, job: JobRecord) -> JobPosting:
        posting = self._prepare(job)
        with self._lock:
            self._jobs[posting.id] = posting
        return posting

    def bulk_import(self, jobs: List[JobRecord]) -> List[JobPosting]:
        """
        Validate and insert a batch of jobs.

        Nothing is inserted unless every job is valid. Explicit ids must be
        unique within the batch and not already stored.

        Raises:
            ValueError: If the batch is empty, any job is invalid or an id repeats
        """
        if not isinstance(jobs, list) or not jobs:
            raise ValueError("Invalid jobs array")
        postings = [self._prepare(job) for job in jobs]

        ids = [posting.id for posting in postings]
        repeated = sorted({job_id for job_id in ids if ids.count(job_id) > 1})
        if repeated:
            raise ValueError(f"Duplicate job ids in batch: {', '.join(repeated)}")

        with self._lock:
            existing = sorted(job_id for job_id in ids if job_id in self._jobs)
            if existing:
                raise ValueError(f"Jobs already exist: {', '.join(existing)}")
            for posting in postings:
                self._jobs[posting.id] = posting
        logger.info(f"Imported {len(postings)} jobs")
        return postings

    def get(self, job_id: str) -> JobPosting:
        try:
            return self._jobs[job_id]
        except KeyError:
            raise NotFoundError("Job", job_id) from None

    def _active(self) -> List[JobPosting]:
        with self._lock:
            jobs = [job for job in self._jobs.values() if job.is_active]
        return sorted(jobs, key=lambda job: job.posted_date, reverse=True)

    def list_active(self, limit: Optional[int] = 50) -> List[JobPosting]:
        return self._active()[:limit]

    def search(
        self,
        keywords: Optional[str] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None,
        experience_level: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[JobPosting], int]:
        """
        Filter active jobs and return one page plus the total match count.

        keywords match any word in the title, description or company;
        location is a case-insensitive substring match.
        """
        jobs = self._active()

        if keywords:
            words = [w.lower() for w in keywords.split() if w]
            jobs = [
                job for job in jobs
                if any(w in f"{job.title} {job.description} {job.company}".lower() for w in words)
            ]
        if location:
            jobs = [job for job in jobs if location.lower() in job.location.lower()]
        if job_type:
            jobs = [job for job in jobs if job.job_type == job_type]
        if experience_level:
            jobs = [job for job in jobs if job.experience_level == experience_level]

        start = (max(page, 1) - 1) * limit
        logger.debug(f"Job search matched {len(jobs)} jobs (page {page}, limit {limit})")
        return jobs[start:start + limit], len(jobs)

    def recommend_for_skills(self, skills: List[str], limit: int = 20) -> List[JobPosting]:
        """Active jobs requiring any of the skills or mentioning one in the description."""
        if not skills:
            return self.list_active(limit)

        skill_set = set(skills)
        pattern = re.compile("|".join(re.escape(s) for s in skills), re.IGNORECASE)
        jobs = [
            job for job in self._active()
            if skill_set.intersection(job.required_skills) or pattern.search(job.description)
        ]
        return jobs[:limit]


class ResumeStore:
    """Analyzed resumes kept in memory."""

    def __init__(self):
        self._resumes: Dict[str, Resume] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._resumes)

    def add(self, resume: Union[Resume, Mapping[str, Any]]) -> Resume:
        record = resume if isinstance(resume, Resume) else Resume.model_validate(resume)
        if not record.id:
            record = record.model_copy(update={"id": new_id()})
        with self._lock:
            self._resumes[record.id] = record
        return record

    def get(self, resume_id: str) -> Resume:
        try:
            return self._resumes[resume_id]
        except KeyError:
            raise NotFoundError("Resume", resume_id) from None

    def list(self, limit: Optional[int] = 10, oldest_first: bool = False) -> List[Resume]:
        with self._lock:
            resumes = list(self._resumes.values())
        resumes.sort(key=lambda r: r.uploaded_at, reverse=not oldest_first)
        return resumes if limit is None else resumes[:limit]

    def delete(self, resume_id: str) -> None:
        with self._lock:
            if self._resumes.pop(resume_id, None) is None:
                raise NotFoundError("Resume", resume_id)


def seeded_job_store() -> JobStore:
    """A job store holding the sample jobs, newest first in listing order."""
    now = utc_now()
    jobs = [
        {**job, "posted_date": now - timedelta(minutes=i)}
        for i, job in enumerate(SAMPLE_JOBS)
    ]
    return JobStore(jobs)


# Singleton instances
_job_store: Optional[JobStore] = None
_resume_store: Optional[ResumeStore] = None


def get_job_store() -> JobStore:
    """Get or create the job store."""
    global _job_store
    if _job_store is None:
        _job_store = seeded_job_store()
        logger.info(f"Seeded job store with {len(_job_store)} jobs")
    return _job_store


def get_resume_store() -> ResumeStore:
    """Get or create the resume store."""
    global _resume_store
    if _resume_store is None:
        _resume_store = ResumeStore()
    return _resume_store
