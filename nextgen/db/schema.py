from __future__ import annotations

TABLES: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE COLLATE NOCASE,
        password_hash TEXT,
        first_name TEXT,
        last_name TEXT,
        phone_number TEXT,
        date_of_birth TEXT,
        current_city TEXT,
        bio TEXT,
        linkedin_url TEXT,
        github_url TEXT,
        profile_picture_url TEXT,
        account_status TEXT NOT NULL DEFAULT 'active',
        two_factor_enabled INTEGER NOT NULL DEFAULT 0,
        current_job_title TEXT,
        dream_job TEXT,
        years_of_experience INTEGER,
        preferred_location TEXT,
        salary_expectation TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS education (
        education_id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL REFERENCES users (user_id) ON DELETE CASCADE,
        degree_type TEXT,
        degree_title TEXT,
        institution_name TEXT,
        field_of_study TEXT,
        start_date TEXT,
        end_date TEXT,
        is_current INTEGER NOT NULL DEFAULT 0,
        grade_cgpa REAL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS work_experience (
        experience_id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL REFERENCES users (user_id) ON DELETE CASCADE,
        job_title TEXT,
        company_name TEXT,
        employment_type TEXT,
        start_date TEXT,
        end_date TEXT,
        is_current INTEGER NOT NULL DEFAULT 0,
        description TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS skills_catalog (
        skill_id INTEGER PRIMARY KEY AUTOINCREMENT,
        skill_name TEXT NOT NULL UNIQUE COLLATE NOCASE,
        skill_category TEXT NOT NULL DEFAULT 'technical',
        demand_score REAL NOT NULL DEFAULT 0,
        is_trending INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_skills (
        user_skill_id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL REFERENCES users (user_id) ON DELETE CASCADE,
        skill_id INTEGER NOT NULL REFERENCES skills_catalog (skill_id) ON DELETE CASCADE,
        proficiency_level TEXT NOT NULL DEFAULT 'intermediate',
        years_of_experience REAL NOT NULL DEFAULT 0,
        source TEXT NOT NULL DEFAULT 'manual_entry',
        created_at TEXT NOT NULL,
        UNIQUE (user_id, skill_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS skill_gaps (
        gap_id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL REFERENCES users (user_id) ON DELETE CASCADE,
        skill_id INTEGER NOT NULL REFERENCES skills_catalog (skill_id) ON DELETE CASCADE,
        current_level TEXT,
        target_level TEXT,
        gap_severity TEXT NOT NULL DEFAULT 'medium',
        priority_score REAL NOT NULL DEFAULT 0,
        is_resolved INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS job_postings (
        job_id INTEGER PRIMARY KEY AUTOINCREMENT,
        job_title TEXT NOT NULL,
        company_name TEXT NOT NULL,
        job_location TEXT,
        job_type TEXT NOT NULL DEFAULT 'full_time',
        salary_min INTEGER,
        salary_max INTEGER,
        job_description TEXT,
        required_skills TEXT NOT NULL DEFAULT '[]',
        posted_date TEXT NOT NULL,
        is_active INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS recommendations (
        recommendation_id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL REFERENCES users (user_id) ON DELETE CASCADE,
        entity_type TEXT NOT NULL DEFAULT 'job',
        entity_id INTEGER NOT NULL,
        match_score REAL NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS opportunities (
        opportunity_id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        organization_name TEXT,
        opportunity_type TEXT NOT NULL DEFAULT 'scholarship',
        deadline TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS applications (
        application_id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL REFERENCES users (user_id) ON DELETE CASCADE,
        application_type TEXT NOT NULL DEFAULT 'job',
        entity_id INTEGER NOT NULL,
        status TEXT NOT NULL DEFAULT 'applied',
        notes TEXT,
        applied_date TEXT NOT NULL,
        UNIQUE (user_id, application_type, entity_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS learning_paths (
        path_id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL REFERENCES users (user_id) ON DELETE CASCADE,
        path_name TEXT NOT NULL,
        target_role TEXT,
        status TEXT NOT NULL DEFAULT 'active',
        completion_percentage REAL NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS learning_modules (
        module_id INTEGER PRIMARY KEY AUTOINCREMENT,
        path_id INTEGER NOT NULL REFERENCES learning_paths (path_id) ON DELETE CASCADE,
        module_name TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'not_started'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS resumes (
        resume_id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL REFERENCES users (user_id) ON DELETE CASCADE,
        file_name TEXT NOT NULL,
        file_path TEXT NOT NULL,
        file_type TEXT NOT NULL,
        file_size INTEGER NOT NULL DEFAULT 0,
        parsing_status TEXT NOT NULL DEFAULT 'pending',
        parsed_data TEXT,
        parsed_text TEXT,
        upload_date TEXT NOT NULL,
        is_active INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS chat_sessions (
        session_id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL REFERENCES users (user_id) ON DELETE CASCADE,
        messages TEXT NOT NULL DEFAULT '[]',
        started_at TEXT NOT NULL,
        last_message_at TEXT NOT NULL,
        is_active INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ats_reports (
        report_id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL REFERENCES users (user_id) ON DELETE CASCADE,
        score REAL NOT NULL DEFAULT 0,
        summary TEXT,
        strengths TEXT NOT NULL DEFAULT '[]',
        gaps TEXT NOT NULL DEFAULT '[]',
        recommendations TEXT NOT NULL DEFAULT '[]',
        keywords_to_add TEXT NOT NULL DEFAULT '[]',
        breakdown TEXT NOT NULL DEFAULT '{}',
        model_used TEXT,
        raw_response TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS otp_codes (
        otp_id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT NOT NULL COLLATE NOCASE,
        purpose TEXT NOT NULL,
        code_hash TEXT NOT NULL,
        attempts INTEGER NOT NULL DEFAULT 0,
        consumed INTEGER NOT NULL DEFAULT 0,
        expires_at TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
)

INDEXES: tuple[str, ...] = (
    "CREATE INDEX IF NOT EXISTS idx_education_user ON education (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_work_experience_user ON work_experience (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_user_skills_user ON user_skills (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_job_postings_posted ON job_postings (is_active, posted_date)",
    "CREATE INDEX IF NOT EXISTS idx_applications_user ON applications (user_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_chat_sessions_user ON chat_sessions (user_id, is_active, last_message_at)",
    "CREATE INDEX IF NOT EXISTS idx_ats_reports_user ON ats_reports (user_id, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_otp_codes_lookup ON otp_codes (email, purpose, consumed)",
)

# Children first so clearing respects foreign keys.
TABLE_NAMES: tuple[str, ...] = (
    "otp_codes",
    "ats_reports",
    "chat_sessions",
    "resumes",
    "learning_modules",
    "learning_paths",
    "applications",
    "opportunities",
    "recommendations",
    "job_postings",
    "skill_gaps",
    "user_skills",
    "skills_catalog",
    "work_experience",
    "education",
    "users",
)

BOOL_COLUMNS = frozenset(
    {
        "is_current",
        "is_active",
        "is_trending",
        "is_resolved",
        "two_factor_enabled",
        "consumed",
    }
)

JSON_COLUMNS = frozenset(
    {
        "required_skills",
        "messages",
        "strengths",
        "gaps",
        "recommendations",
        "keywords_to_add",
        "breakdown",
        "parsed_data",
    }
)
