"""
Dashboard aggregates over stored resumes and jobs.
"""
from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List

from matching.schemas import JobPosting, Resume


def dashboard_stats(resumes: List[Resume]) -> Dict[str, Any]:
    """Resume count, average ATS score and the latest resume's scores."""
    latest = max(resumes, key=lambda r: r.uploaded_at) if resumes else None
    avg_ats = round(sum(r.analysis.ats_score for r in resumes) / len(resumes)) if resumes else 0
    return {
        "total_resumes": len(resumes),
        "avg_ats_score": avg_ats,
        "latest_resume_score": latest.analysis.ats_score if latest else 0,
        "interview_probability": latest.analysis.interview_probability if latest else 0,
        "last_updated": latest.uploaded_at if latest else None,
    }


def resume_performance(resumes: List[Resume]) -> List[Dict[str, Any]]:
    """Scores per resume, oldest first."""
    return [
        {
            "date": r.uploaded_at,
            "file_name": r.file_name,
            "ats_score": r.analysis.ats_score,
            "overall_match": r.analysis.overall_match,
            "interview_probability": r.analysis.interview_probability,
        }
        for r in sorted(resumes, key=lambda r: r.uploaded_at)
    ]


def skill_trends(resumes: List[Resume], top: int = 10) -> Dict[str, Any]:
    """Most frequent skill gaps and every skill seen across resumes."""
    gaps: Dict[str, Dict[str, Any]] = {}
    acquired: List[str] = []

    for resume in sorted(resumes, key=lambda r: r.uploaded_at):
        for skill in resume.analysis.key_skills:
            if skill not in acquired:
                acquired.append(skill)
        for gap in resume.analysis.skill_gaps:
            entry = gaps.setdefault(gap.skill, {
                "skill": gap.skill,
                "frequency": 0,
                "importance": gap.importance,
                "first_seen": resume.uploaded_at,
            })
            entry["frequency"] += 1

    top_gaps = sorted(gaps.values(), key=lambda g: g["frequency"], reverse=True)[:top]
    return {
        "top_skill_gaps": top_gaps,
        "total_skills_acquired": len(acquired),
        "skills_acquired": acquired,
    }


def improvement_insights(resume: Resume) -> List[Dict[str, str]]:
    """Advice cards derived from one resume's analysis."""
    analysis = resume.analysis
    insights = []

    if analysis.ats_score < 70:
        insights.append({
            "type": "warning",
            "category": "ATS Optimization",
            "title": "Low ATS Score",
            "message": "Your resume may not pass automated screening. Focus on keyword optimization.",
            "action": "Review job descriptions and add relevant keywords",
        })
    elif analysis.ats_score >= 85:
        insights.append({
            "type": "success",
            "category": "ATS Optimization",
            "title": "Excellent ATS Score",
            "message": "Your resume is well-optimized for automated systems.",
            "action": "Maintain current keyword strategy",
        })

    if analysis.interview_probability < 60:
        insights.append({
            "type": "warning",
            "category": "Interview Readiness",
            "title": "Low Interview Probability",
            "message": "Add more quantifiable achievements and impact statements.",
            "action": "Include metrics and numbers in your accomplishments",
        })

    high_priority = [g.skill for g in analysis.skill_gaps if g.importance == "High"]
    if high_priority:
        insights.append({
            "type": "info",
            "category": "Skill Development",
            "title": "Critical Skill Gaps Identified",
            "message": f"Focus on acquiring: {', '.join(high_priority)}",
            "action": "Take courses or build projects in these areas",
        })

    if analysis.improvements:
        insights.append({
            "type": "info",
            "category": "Content Quality",
            "title": "Areas for Improvement",
            "message": analysis.improvements[0],
            "action": "Review and implement suggested improvements",
        })

    return insights


def _counts(values: List[str], limit: int = None) -> List[Dict[str, Any]]:
    return [{"name": name, "count": count} for name, count in Counter(values).most_common(limit)]


def market_trends(jobs: List[JobPosting]) -> Dict[str, Any]:
    """Breakdown of active jobs by type, level, company and required skill."""
    active = [job for job in jobs if job.is_active]
    return {
        "jobs_by_type": _counts([job.job_type for job in active]),
        "jobs_by_experience": _counts([job.experience_level for job in active]),
        "top_companies": _counts([job.company for job in active], 10),
        "skill_demand": _counts([skill for job in active for skill in job.required_skills], 15),
        "total_active_jobs": len(active),
    }
