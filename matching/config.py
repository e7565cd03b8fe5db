"""
Configuration for the job-resume matching system.
Adjust weights and parameters here.
"""

# Component weights (must sum to 1.0)
WEIGHTS = {
    "skills": 0.40,
    "experience": 0.25,
    "education": 0.15,
    "location": 0.10,
    "keywords": 0.10,
}

# Scores used when one side states no requirement or has no data
NEUTRAL_SCORES = {
    "no_required_skills": 50,
    "no_experience_required": 100,
    "no_education_required": 100,
    "no_location": 100,
    "no_keywords": 50,
}

# Experience tiers: (minimum ratio of required years, score), checked in order
EXPERIENCE_TIERS = [
    (1.0, 100),
    (0.8, 85),
    (0.6, 70),
    (0.4, 50),
]
EXPERIENCE_FLOOR_SCORE = 30

# Degree tokens searched in resume and job text, mapped to rank
EDUCATION_LEVELS = {
    "high school": 1,
    "associate": 2,
    "bachelor": 3,
    "master": 4,
    "phd": 5,
    "doctorate": 5,
}

# Education level scoring
EDUCATION_SCORES = {
    "meets": 100,
    "one_below": 80,
    "other": 50,
}

# Location scoring
REMOTE_LOCATION_TOKENS = ("remote", "anywhere")
LOCATION_SCORES = {
    "match": 100,
    "unknown": 50,
}

# Keyword coverage is amplified before capping at 100
KEYWORD_AMPLIFICATION = 1.5

# Ranking limits
MATCHING_LIMITS = {
    "default_limit": 10,
    "candidate_limit": 50,
    "recommendation_candidates": 20,
}

# LLM configuration
LLM_CONFIG = {
    "temperature": 0,  # For maximum consistency
    "model": "gpt-4o-mini",  # Default model
    "max_retries": 3,
    "max_resume_chars": 3000,
}

# Skills the heuristic analyzer looks for in raw resume text
HEURISTIC_SKILLS = [
    "JavaScript", "Python", "Java", "React", "Node.js", "MongoDB",
    "SQL", "Git", "AWS", "Docker", "TypeScript", "Angular", "Vue",
    "C++", "C#", "PHP", "Ruby", "Swift", "Kotlin", "Go", "Rust",
    "HTML", "CSS", "REST API", "GraphQL", "Redis", "PostgreSQL",
    "MySQL", "Express", "Django", "Flask", "Spring", "Laravel",
    "Kubernetes", "Jenkins", "TensorFlow", "PyTorch", "Pandas",
]

# Fallback skills when nothing from the catalog is found
GENERIC_SKILLS = ["Communication", "Problem Solving", "Teamwork", "Programming", "Analysis"]
GENERIC_KEYWORDS = ["Software", "Development", "Engineering"]

# Skill gaps suggested by the heuristic analyzer, most important first
DEFAULT_SKILL_GAPS = [
    {"skill": "Cloud Computing (AWS/Azure/GCP)", "importance": "High"},
    {"skill": "CI/CD and DevOps practices", "importance": "High"},
    {"skill": "System Design & Architecture", "importance": "Medium"},
    {"skill": "Microservices Architecture", "importance": "Medium"},
    {"skill": "Container Orchestration", "importance": "Medium"},
    {"skill": "Test-Driven Development", "importance": "Low"},
]

# Heuristic ATS scoring
HEURISTIC_SCORING = {
    "base": 70,
    "per_skill": 2,
    "max_skill_bonus": 15,
    "education_bonus": 5,
    "contact_bonus": 5,
    "length_bonus": 5,
    "length_threshold": 2000,
    "default_years": 2,
    "max_interview_probability": 95,
}
