"""
connectpro/profiles.py
Profile record access for ConnectionPro.

The profiles table is the server-side mirror of the onboarding flag and holds
the answers given on the onboarding form.
"""

import logging

import pandas as pd

from connectpro.db import query_df, run_query

logger = logging.getLogger(__name__)

INDUSTRIES = [
    "Technology",
    "Healthcare",
    "Education",
    "Finance",
    "Marketing",
    "Sales",
    "Human Resources",
    "Design",
    "Engineering",
    "Consulting",
    "Other",
]

CAREER_LEVELS = [
    "Intern",
    "Junior",
    "Mid-level",
    "Senior",
    "Specialist",
    "Coordinator",
    "Manager",
    "Director",
    "VP/C-Level",
]

COMMON_SKILLS = [
    "JavaScript", "React", "Node.js", "Python", "Java", "C#", ".NET",
    "Digital Marketing", "SEO", "SEM", "Project Management", "Scrum", "Agile",
    "Sales", "Negotiation", "Customer Service", "Leadership", "Communication",
    "Data Analysis", "Excel", "Power BI", "SQL", "Photoshop", "Figma",
]

_ONBOARDING_FIELDS = ("job_title", "industry", "career_level", "location", "bio", "skills")


def get_profile(user_id: str) -> dict | None:
    """Return the user's profile row as a dict, or None if they have none yet."""
    df = query_df("SELECT * FROM profiles WHERE user_id = %s", (user_id,))
    if df.empty:
        return None
    return df.iloc[0].to_dict()


def get_onboarding_completed(user_id: str) -> bool:
    """
    Return True if the profile record says onboarding is done.

    A missing row or a NULL flag both count as not completed.
    """
    df = query_df(
        "SELECT onboarding_completed FROM profiles WHERE user_id = %s",
        (user_id,),
    )
    if df.empty:
        return False
    value = df.iloc[0]["onboarding_completed"]
    return bool(value) if pd.notna(value) else False


def clean_skills(skills) -> list[str]:
    """Strip blanks and duplicates from a skills list, keeping first-seen order."""
    seen: list[str] = []
    for skill in skills or []:
        skill = str(skill).strip()
        if skill and skill not in seen:
            seen.append(skill)
    return seen


def save_onboarding(user_id: str, answers: dict, full_name: str = "", email: str = "") -> None:
    """
    Upsert the onboarding answers and mark onboarding completed.

    answers may contain job_title, industry, career_level, location, bio and
    skills; missing keys are stored as NULL (skills as an empty array).
    Raises on database errors.
    """
    values = {field: answers.get(field) or None for field in _ONBOARDING_FIELDS}
    values["skills"] = clean_skills(answers.get("skills"))

    run_query(
        """
        INSERT INTO profiles (
            user_id, full_name, email,
            job_title, industry, career_level, location, bio, skills,
            onboarding_completed, updated_at
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, TRUE, NOW())
        ON CONFLICT (user_id) DO UPDATE SET
            full_name            = EXCLUDED.full_name,
            email                = EXCLUDED.email,
            job_title            = EXCLUDED.job_title,
            industry             = EXCLUDED.industry,
            career_level         = EXCLUDED.career_level,
            location             = EXCLUDED.location,
            bio                  = EXCLUDED.bio,
            skills               = EXCLUDED.skills,
            onboarding_completed = TRUE,
            updated_at           = NOW()
        """,
        (
            user_id, full_name, email,
            values["job_title"], values["industry"], values["career_level"],
            values["location"], values["bio"], values["skills"],
        ),
    )
    logger.info("Saved onboarding answers for user %s", user_id)


def mark_onboarding_completed(user_id: str, full_name: str = "", email: str = "") -> None:
    """Record a skipped onboarding: set the flag without touching other answers."""
    run_query(
        """
        INSERT INTO profiles (user_id, full_name, email, onboarding_completed, updated_at)
        VALUES (%s, %s, %s, TRUE, NOW())
        ON CONFLICT (user_id) DO UPDATE SET
            onboarding_completed = TRUE,
            updated_at           = NOW()
        """,
        (user_id, full_name, email),
    )


def default_full_name(metadata: dict, email: str | None) -> str:
    """Display name from auth metadata, falling back to the email's local part."""
    name = (metadata or {}).get("full_name")
    if name:
        return name
    return (email or "").split("@")[0]
