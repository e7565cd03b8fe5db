"""
Unit tests for the in-memory stores and dashboard analytics.
"""

import unittest
import logging
from datetime import datetime, timedelta, timezone

import analytics
from matching import NotFoundError
from matching.schemas import JobPosting, Resume
from storage import JobStore, ResumeStore, SAMPLE_JOBS, seeded_job_store

# Configure logging for tests
logging.basicConfig(level=logging.INFO)


BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_resume(resume_id, minutes, **analysis):
    return Resume.model_validate({
        "id": resume_id,
        "file_name": f"{resume_id}.txt",
        "uploaded_at": BASE_TIME + timedelta(minutes=minutes),
        "analysis": analysis,
    })


class TestJobStore(unittest.TestCase):
    """Test job listing, search and recommendation candidates."""

    def setUp(self):
        self.store = seeded_job_store()

    def test_seeded(self):
        self.assertEqual(len(self.store), len(SAMPLE_JOBS))
        newest = self.store.list_active()[0]
        self.assertEqual(newest.title, "Full Stack Developer")
        self.assertTrue(newest.id)

    def test_list_active_limit(self):
        self.assertEqual(len(self.store.list_active(3)), 3)
        self.assertEqual(len(self.store.list_active(None)), 10)

    def test_inactive_jobs_hidden(self):
        self.store.add({"id": "closed", "title": "React Lead", "is_active": False})

        self.assertNotIn("closed", [job.id for job in self.store.list_active(None)])
        found, total = self.store.search(keywords="React")
        self.assertNotIn("closed", [job.id for job in found])
        self.assertEqual(self.store.get("closed").title, "React Lead")

    def test_search_keywords(self):
        found, total = self.store.search(keywords="React")
        self.assertEqual(total, 4)
        for job in found:
            self.assertIn("react", f"{job.title} {job.description} {job.company}".lower())

    def test_search_any_keyword(self):
        _, total = self.store.search(keywords="Kubernetes Spring")
        # DevOps has no Kubernetes in the text, only in required skills
        self.assertEqual(total, 1)

    def test_search_filters(self):
        _, total = self.store.search(location="remote")
        self.assertEqual(total, 2)
        _, total = self.store.search(experience_level="Senior")
        self.assertEqual(total, 2)
        _, total = self.store.search(location="Bengaluru", experience_level="Mid")
        self.assertEqual(total, 3)
        _, total = self.store.search(job_type="Internship")
        self.assertEqual(total, 0)

    def test_search_pagination(self):
        found, total = self.store.search(page=4, limit=3)
        self.assertEqual(total, 10)
        self.assertEqual(len(found), 1)
        self.assertEqual(found[0].title, "Full Stack Java Developer")

    def test_recommend_for_skills(self):
        jobs = self.store.recommend_for_skills(["Python"])
        self.assertEqual(
            [job.title for job in jobs],
            ["Software Engineer - Backend", "AI/ML Engineer", "Backend Developer - Python"],
        )

    def test_recommend_matches_description(self):
        jobs = self.store.recommend_for_skills(["nlp"])
        self.assertEqual([job.title for job in jobs], ["AI/ML Engineer"])

    def test_recommend_escapes_skills(self):
        self.assertEqual(self.store.recommend_for_skills(["C++"]), [])

    def test_recommend_without_skills(self):
        self.assertEqual(len(self.store.recommend_for_skills([])), 10)
        self.assertEqual(len(self.store.recommend_for_skills([], limit=4)), 4)

    def test_bulk_import(self):
        imported = self.store.bulk_import([{"title": "SRE"}, JobPosting(id="qa", title="QA Engineer")])

        self.assertEqual(len(imported), 2)
        self.assertTrue(imported[0].id)
        self.assertEqual(imported[1].id, "qa")
        self.assertEqual(len(self.store), 12)

    def test_bulk_import_is_all_or_nothing(self):
        with self.assertRaises(ValueError):
            self.store.bulk_import([{"title": "SRE"}, {"title": "Bad", "required_skills": "Go"}])
        self.assertEqual(len(self.store), 10)

    def test_bulk_import_camel_case_fields(self):
        """Documents in the stored camelCase shape keep their skills and requirements."""
        imported = self.store.bulk_import([{
            "_id": "mongo-1",
            "title": "Platform Engineer",
            "jobType": "Contract",
            "experienceLevel": "Senior",
            "requiredSkills": ["Go", "Kubernetes"],
            "preferredSkills": ["Terraform"],
            "experienceRequired": 4,
            "isActive": False,
        }])[0]

        self.assertEqual(imported.id, "mongo-1")
        self.assertEqual(imported.job_type, "Contract")
        self.assertEqual(imported.experience_level, "Senior")
        self.assertEqual(imported.required_skills, ["Go", "Kubernetes"])
        self.assertEqual(imported.preferred_skills, ["Terraform"])
        self.assertEqual(imported.experience_required, 4)
        self.assertFalse(imported.is_active)

    def test_bulk_import_rejects_repeated_ids(self):
        with self.assertRaises(ValueError):
            self.store.bulk_import([{"id": "x", "title": "A"}, {"id": "x", "title": "B"}])
        self.assertEqual(len(self.store), 10)

    def test_bulk_import_rejects_existing_ids(self):
        existing = self.store.list_active()[0]

        with self.assertRaises(ValueError):
            self.store.bulk_import([{"title": "New"}, {"id": existing.id, "title": "Replacement"}])
        self.assertEqual(self.store.get(existing.id).title, existing.title)
        self.assertEqual(len(self.store), 10)

    def test_bulk_import_empty(self):
        with self.assertRaises(ValueError):
            self.store.bulk_import([])

    def test_get_missing(self):
        with self.assertRaises(NotFoundError):
            self.store.get("missing")


class TestResumeStore(unittest.TestCase):

    def setUp(self):
        self.store = ResumeStore()

    def test_add_assigns_id(self):
        resume = self.store.add({"content": "text"})
        self.assertTrue(resume.id)
        self.assertEqual(self.store.get(resume.id).content, "text")

    def test_list_order(self):
        for i in range(3):
            self.store.add(make_resume(f"r{i}", i))

        self.assertEqual([r.id for r in self.store.list()], ["r2", "r1", "r0"])
        self.assertEqual([r.id for r in self.store.list(oldest_first=True)], ["r0", "r1", "r2"])
        self.assertEqual([r.id for r in self.store.list(limit=1)], ["r2"])
        self.assertEqual(len(self.store.list(limit=None)), 3)

    def test_delete(self):
        self.store.add(make_resume("r1", 0))
        self.store.delete("r1")

        with self.assertRaises(NotFoundError):
            self.store.get("r1")
        with self.assertRaises(NotFoundError):
            self.store.delete("r1")


class TestAnalytics(unittest.TestCase):
    """Test dashboard aggregates."""

    def test_dashboard_without_resumes(self):
        stats = analytics.dashboard_stats([])
        self.assertEqual(stats["total_resumes"], 0)
        self.assertEqual(stats["avg_ats_score"], 0)
        self.assertIsNone(stats["last_updated"])

    def test_dashboard_stats(self):
        resumes = [
            make_resume("old", 0, ats_score=80, interview_probability=60),
            make_resume("new", 5, ats_score=90, interview_probability=75),
        ]
        stats = analytics.dashboard_stats(resumes)

        self.assertEqual(stats["total_resumes"], 2)
        self.assertEqual(stats["avg_ats_score"], 85)
        self.assertEqual(stats["latest_resume_score"], 90)
        self.assertEqual(stats["interview_probability"], 75)
        self.assertEqual(stats["last_updated"], BASE_TIME + timedelta(minutes=5))

    def test_resume_performance_oldest_first(self):
        resumes = [make_resume("new", 5, ats_score=90), make_resume("old", 0, ats_score=70)]
        points = analytics.resume_performance(resumes)
        self.assertEqual([p["ats_score"] for p in points], [70, 90])

    def test_skill_trends(self):
        resumes = [
            make_resume("a", 0, key_skills=["Python", "SQL"],
                        skill_gaps=[{"skill": "AWS", "importance": "High"}]),
            make_resume("b", 1, key_skills=["Python", "React"],
                        skill_gaps=[{"skill": "AWS", "importance": "High"}, {"skill": "Docker"}]),
        ]
        trends = analytics.skill_trends(resumes)

        self.assertEqual(trends["skills_acquired"], ["Python", "SQL", "React"])
        self.assertEqual(trends["total_skills_acquired"], 3)
        self.assertEqual(trends["top_skill_gaps"][0]["skill"], "AWS")
        self.assertEqual(trends["top_skill_gaps"][0]["frequency"], 2)
        self.assertEqual(trends["top_skill_gaps"][0]["first_seen"], BASE_TIME)

    def test_improvement_insights(self):
        resume = make_resume(
            "r", 0,
            ats_score=60,
            interview_probability=50,
            skill_gaps=[{"skill": "AWS", "importance": "High"}, {"skill": "Go", "importance": "Low"}],
            improvements=["Add metrics"],
        )
        insights = analytics.improvement_insights(resume)

        self.assertEqual([i["category"] for i in insights],
                         ["ATS Optimization", "Interview Readiness", "Skill Development", "Content Quality"])
        self.assertEqual(insights[2]["message"], "Focus on acquiring: AWS")
        self.assertEqual(insights[3]["message"], "Add metrics")

    def test_excellent_ats_insight(self):
        insights = analytics.improvement_insights(make_resume("r", 0, ats_score=90, interview_probability=80))
        self.assertEqual(len(insights), 1)
        self.assertEqual(insights[0]["type"], "success")

    def test_market_trends(self):
        trends = analytics.market_trends(seeded_job_store().list_active(None))

        self.assertEqual(trends["total_active_jobs"], 10)
        self.assertEqual(trends["jobs_by_type"], [{"name": "Full-time", "count": 10}])
        self.assertEqual(trends["jobs_by_experience"][0], {"name": "Mid", "count": 6})
        self.assertEqual(trends["skill_demand"][0], {"name": "JavaScript", "count": 5})
        self.assertLessEqual(len(trends["skill_demand"]), 15)


if __name__ == "__main__":
    unittest.main()
