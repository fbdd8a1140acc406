from __future__ import annotations

import argparse
import os
from datetime import date, timedelta

SEED_SKILLS = (
    ("Python", "technical", 95, True),
    ("JavaScript", "technical", 92, True),
    ("TypeScript", "technical", 88, True),
    ("React", "technical", 90, True),
    ("Node.js", "technical", 85, False),
    ("SQL", "technical", 90, False),
    ("PostgreSQL", "technical", 80, False),
    ("Docker", "technical", 84, True),
    ("Kubernetes", "technical", 78, True),
    ("AWS", "technical", 88, True),
    ("Machine Learning", "technical", 86, True),
    ("Data Analysis", "technical", 80, False),
    ("Git", "tool", 75, False),
    ("Figma", "tool", 60, False),
    ("Communication", "soft", 70, False),
    ("Leadership", "soft", 65, False),
    ("Problem Solving", "soft", 72, False),
)

SEED_JOBS = (
    {
        "job_title": "Senior Frontend Developer",
        "company_name": "TechNova",
        "job_location": "Remote",
        "job_type": "full_time",
        "salary_min": 120000,
        "salary_max": 150000,
        "job_description": "Build modern web interfaces with React and TypeScript.",
        "required_skills": ["React", "TypeScript", "JavaScript", "Git"],
        "days_ago": 0,
    },
    {
        "job_title": "Backend Engineer",
        "company_name": "CloudScale",
        "job_location": "Karachi",
        "job_type": "full_time",
        "salary_min": 90000,
        "salary_max": None,
        "job_description": "Design APIs and data pipelines in Python on AWS.",
        "required_skills": ["Python", "SQL", "AWS", "Docker"],
        "days_ago": 1,
    },
    {
        "job_title": "Machine Learning Intern",
        "company_name": "DataMinds",
        "job_location": "Lahore",
        "job_type": "internship",
        "salary_min": None,
        "salary_max": None,
        "job_description": "Assist the research team with model training and evaluation.",
        "required_skills": ["Python", "Machine Learning", "Data Analysis"],
        "days_ago": 5,
    },
    {
        "job_title": "DevOps Engineer",
        "company_name": "InfraWorks",
        "job_location": "Remote",
        "job_type": "contract",
        "salary_min": None,
        "salary_max": 110000,
        "job_description": "Own CI/CD, container orchestration and cloud infrastructure.",
        "required_skills": ["Docker", "Kubernetes", "AWS", "Git"],
        "days_ago": 12,
    },
    {
        "job_title": "Product Designer",
        "company_name": "PixelCraft",
        "job_location": "Islamabad",
        "job_type": "part_time",
        "salary_min": 40000,
        "salary_max": 60000,
        "job_description": "Shape product flows and design systems in Figma.",
        "required_skills": ["Figma", "Communication"],
        "days_ago": 40,
    },
)


def seed_catalog() -> int:
    from nextgen.db.connection import execute

    inserted = 0
    for name, category, demand, trending in SEED_SKILLS:
        cursor = execute(
            """
            INSERT INTO skills_catalog (skill_name, skill_category, demand_score, is_trending)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (skill_name) DO NOTHING
            """,
            (name, category, demand, 1 if trending else 0),
        )
        inserted += int(cursor.rowcount or 0)
    return inserted


def seed_jobs() -> int:
    from nextgen.db.connection import fetch_value
    from nextgen.db.jobs import insert_job

    if fetch_value("SELECT COUNT(*) FROM job_postings"):
        return 0
    today = date.today()
    for job in SEED_JOBS:
        record = {key: value for key, value in job.items() if key != "days_ago"}
        record["posted_date"] = (today - timedelta(days=job["days_ago"])).isoformat()
        insert_job(record)
    return len(SEED_JOBS)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the database schema and seed reference data.")
    parser.add_argument("--database", default=None, help="SQLite file path (defaults to DATABASE_PATH)")
    parser.add_argument("--no-seed", action="store_true", help="Only create the schema.")
    parser.add_argument("--reset", action="store_true", help="Delete all rows before seeding.")
    args = parser.parse_args()

    if args.database:
        os.environ["DATABASE_PATH"] = args.database

    from nextgen.core.config import settings
    from nextgen.db.connection import clear_all_tables, close_db, init_db

    init_db()
    print(f"Schema ready at {settings.database_path}")
    try:
        if args.reset:
            clear_all_tables()
            print("All tables cleared.")
        if not args.no_seed:
            print(f"Seeded {seed_catalog()} skills and {seed_jobs()} job postings.")
    finally:
        close_db()


if __name__ == "__main__":
    main()
