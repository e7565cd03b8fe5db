"""
Unit tests for the deterministic scoring engine.
"""

import unittest
import logging

from matching.schemas import JobPosting, Resume
from matching.scoring_engine import (
    calculate_skills_score,
    calculate_experience_score,
    calculate_education_score,
    calculate_location_score,
    calculate_keyword_score,
    calculate_match_score,
    detect_education_level,
    partition_skills,
    round_score,
)

# Configure logging for tests
logging.basicConfig(level=logging.INFO)


def make_resume(skills=None, keywords=None, years=0, content=""):
    return Resume.model_validate({
        "content": content,
        "analysis": {
            "key_skills": skills or [],
            "keywords": keywords or [],
            "experience": {"years": years},
        },
    })


class TestSkillsScore(unittest.TestCase):
    """Test skills overlap scoring."""

    def test_no_required_skills_is_neutral(self):
        """Jobs without required skills score 50 whatever the resume has."""
        self.assertEqual(calculate_skills_score([], ["Python", "React"]), 50.0)
        self.assertEqual(calculate_skills_score([], []), 50.0)

    def test_substring_match_both_directions(self):
        """'React' matches 'React.js' and 'mongo' matches 'MongoDB'."""
        score = calculate_skills_score(["React", "MongoDB"], ["react.js", "Mongo"])
        self.assertEqual(score, 100.0)

    def test_case_insensitive_partial_match(self):
        score = calculate_skills_score(["Python", "Java", "SQL", "Go Lang"], ["PYTHON", "sql"])
        self.assertEqual(score, 50.0)

    def test_no_resume_skills(self):
        self.assertEqual(calculate_skills_score(["Python"], []), 0.0)


class TestExperienceScore(unittest.TestCase):
    """Test tiered experience scoring."""

    def test_no_requirement(self):
        self.assertEqual(calculate_experience_score(0, 0), 100.0)
        self.assertEqual(calculate_experience_score(0, 12), 100.0)

    def test_meets_or_exceeds(self):
        self.assertEqual(calculate_experience_score(3, 3), 100.0)
        self.assertEqual(calculate_experience_score(3, 10), 100.0)

    def test_tiers(self):
        self.assertEqual(calculate_experience_score(5, 4), 85.0)
        self.assertEqual(calculate_experience_score(5, 3), 70.0)
        self.assertEqual(calculate_experience_score(5, 1), 30.0)

    def test_lower_tier_boundary_is_inclusive(self):
        """2 of 5 years is exactly 40% and lands in the 50 tier."""
        self.assertEqual(calculate_experience_score(5, 2), 50.0)

    def test_fractional_years(self):
        self.assertEqual(calculate_experience_score(2, 1.7), 85.0)


class TestEducationScore(unittest.TestCase):
    """Test degree-level inference and scoring."""

    def test_detect_highest_level(self):
        self.assertEqual(detect_education_level("High School diploma, Bachelor of Arts, Master of Science"), 4)
        self.assertEqual(detect_education_level("Doctorate in Physics"), 5)
        self.assertEqual(detect_education_level("Self taught"), 0)

    def test_no_requirement(self):
        self.assertEqual(calculate_education_score("High school", "Great team, great pay"), 100.0)

    def test_meets_requirement(self):
        self.assertEqual(calculate_education_score("Master of Science", "Bachelor's degree required"), 100.0)

    def test_one_level_below(self):
        self.assertEqual(calculate_education_score("Bachelor of Engineering", "Master's preferred"), 80.0)
        self.assertEqual(calculate_education_score("Master of Science", "PhD in ML"), 80.0)

    def test_far_below(self):
        self.assertEqual(calculate_education_score("High school graduate", "Master's degree required"), 50.0)
        self.assertEqual(calculate_education_score("", "Bachelor's degree required"), 50.0)


class TestLocationScore(unittest.TestCase):
    """Test location heuristics."""

    def test_no_location(self):
        self.assertEqual(calculate_location_score("", "Anything"), 100.0)
        self.assertEqual(calculate_location_score("   ", "Anything"), 100.0)

    def test_remote_and_anywhere(self):
        self.assertEqual(calculate_location_score("Remote", "Lives in Pune"), 100.0)
        self.assertEqual(calculate_location_score("Hybrid / REMOTE", ""), 100.0)
        self.assertEqual(calculate_location_score("Anywhere in India", ""), 100.0)

    def test_location_part_in_resume(self):
        self.assertEqual(calculate_location_score("Bengaluru, India", "Based in India"), 100.0)
        self.assertEqual(calculate_location_score("Bengaluru, India", "BENGALURU"), 100.0)

    def test_unknown_location_is_neutral(self):
        self.assertEqual(calculate_location_score("Mumbai, India", "Based in Berlin"), 50.0)

    def test_empty_part_matches_any_resume(self):
        """A trailing or doubled comma leaves an empty part, which every resume contains."""
        self.assertEqual(calculate_location_score("Mumbai,", "Based in Berlin"), 100.0)
        self.assertEqual(calculate_location_score("Pune, , India", "Based in Berlin"), 100.0)


class TestKeywordScore(unittest.TestCase):
    """Test keyword overlap scoring."""

    def test_no_keywords_is_neutral(self):
        self.assertEqual(calculate_keyword_score([], "Python developer"), 50.0)

    def test_amplified_ratio(self):
        score = calculate_keyword_score(["Python", "Go", "Rust", "Elixir"], "We use python daily")
        self.assertEqual(score, 37.5)

    def test_capped_at_100(self):
        score = calculate_keyword_score(["Python", "Django"], "Python and Django")
        self.assertEqual(score, 100.0)

    def test_no_description(self):
        self.assertEqual(calculate_keyword_score(["Python"], ""), 0.0)


class TestMatchDetails(unittest.TestCase):
    """Test the matching/missing skill breakdown."""

    def test_partition(self):
        matching, missing = partition_skills(["React", "Express.js", "MongoDB"], ["react.js", "Mongo"])
        self.assertEqual(matching, ["react", "mongodb"])
        self.assertEqual(missing, ["express.js"])

    def test_partition_covers_required_skills(self):
        job_skills = ["Python", "SQL", "Docker", "AWS", "Machine Learning"]
        resume_skills = ["python3", "PostgreSQL", "ml"]
        matching, missing = partition_skills(job_skills, resume_skills)

        self.assertEqual(sorted(matching + missing), sorted(s.lower() for s in job_skills))
        self.assertFalse(set(matching) & set(missing))

    def test_partition_consistent_with_skills_score(self):
        job_skills = ["Python", "SQL", "Docker", "AWS"]
        resume_skills = ["Python", "MySQL"]
        matching, _ = partition_skills(job_skills, resume_skills)
        score = calculate_skills_score(job_skills, resume_skills)
        self.assertEqual(score, len(matching) / len(job_skills) * 100)


class TestMatchScore(unittest.TestCase):
    """Test the combined weighted score."""

    def test_round_half_up(self):
        self.assertEqual(round_score(76.5), 77)
        self.assertEqual(round_score(77.5), 78)
        self.assertEqual(round_score(0.49), 0)
        self.assertEqual(round_score(100.4), 100)

    def test_react_node_scenario(self):
        """React/Node.js/MongoDB resume against a remote React + Express.js job."""
        resume = make_resume(
            skills=["React", "Node.js", "MongoDB"],
            keywords=["React", "Node.js"],
            years=3,
            content="Full stack developer. React, Node.js, MongoDB.",
        )
        job = JobPosting(
            id="job-1",
            required_skills=["React", "Express.js"],
            experience_required=2,
            location="Remote",
            description="Build React apps for our customers.",
        )

        result = calculate_match_score(resume, job)

        self.assertEqual(result.skills_match, 50.0)
        self.assertEqual(result.experience_match, 100.0)
        self.assertEqual(result.breakdown["location"], 100.0)
        self.assertEqual(result.breakdown["education"], 100.0)
        self.assertEqual(result.breakdown["keywords"], 75.0)
        # 50*0.4 + 100*0.25 + 100*0.15 + 100*0.10 + 75*0.10 = 77.5
        self.assertEqual(result.match_score, 78)
        self.assertEqual(result.matching_skills, ["react"])
        self.assertEqual(result.missing_skills, ["express.js"])

    def test_empty_inputs_are_scored(self):
        """Missing data falls back to neutral defaults instead of failing."""
        result = calculate_match_score(Resume(), JobPosting())
        # 50*0.4 + 100*0.25 + 100*0.15 + 100*0.10 + 50*0.10 = 75
        self.assertEqual(result.match_score, 75)
        self.assertEqual(result.matching_skills, [])
        self.assertEqual(result.missing_skills, [])

    def test_score_is_bounded_integer(self):
        resumes = [
            make_resume(),
            make_resume(skills=["Python"], keywords=["Python"], years=10, content="PhD, Pune"),
            make_resume(skills=["Cobol"], keywords=["mainframe"], years=0, content="high school"),
        ]
        jobs = [
            JobPosting(),
            JobPosting(required_skills=["Python", "Go"], experience_required=8,
                       location="Pune, India", description="Master's degree, Python"),
            JobPosting(required_skills=["Rust"], experience_required=30,
                       location="Oslo", description="PhD required"),
        ]
        for resume in resumes:
            for job in jobs:
                score = calculate_match_score(resume, job).match_score
                self.assertIsInstance(score, int)
                self.assertGreaterEqual(score, 0)
                self.assertLessEqual(score, 100)

    def test_determinism(self):
        """Same inputs produce the same result."""
        resume = make_resume(skills=["Python"], keywords=["api"], years=2, content="Bachelor, Delhi")
        job = JobPosting(required_skills=["Python", "Flask"], experience_required=3,
                         location="Delhi, India", description="Build an API. Master's preferred.")
        self.assertEqual(calculate_match_score(resume, job), calculate_match_score(resume, job))


if __name__ == "__main__":
    unittest.main()
