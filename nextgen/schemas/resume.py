from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

DegreeType = Literal["high_school", "bachelors", "masters", "phd", "diploma"]
EmploymentType = Literal["full_time", "part_time", "internship", "freelance"]

DEGREE_TYPES = ("high_school", "bachelors", "masters", "phd", "diploma")
EMPLOYMENT_TYPES = ("full_time", "part_time", "internship", "freelance")

# Handed to the model as the structured-output schema.
RESUME_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "personal_info": {
            "type": "OBJECT",
            "properties": {
                "first_name": {"type": "STRING"},
                "last_name": {"type": "STRING"},
                "phone_number": {"type": "STRING"},
                "current_city": {"type": "STRING"},
                "linkedin_url": {"type": "STRING"},
                "github_url": {"type": "STRING"},
            },
        },
        "education": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "degree_type": {"type": "STRING", "enum": list(DEGREE_TYPES)},
                    "degree_title": {"type": "STRING"},
                    "institution_name": {"type": "STRING"},
                    "field_of_study": {"type": "STRING"},
                    "start_date": {"type": "STRING"},
                    "end_date": {"type": "STRING"},
                    "is_current": {"type": "BOOLEAN"},
                    "grade_cgpa": {"type": "NUMBER"},
                },
            },
        },
        "work_experience": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "job_title": {"type": "STRING"},
                    "company_name": {"type": "STRING"},
                    "employment_type": {"type": "STRING", "enum": list(EMPLOYMENT_TYPES)},
                    "start_date": {"type": "STRING"},
                    "end_date": {"type": "STRING"},
                    "is_current": {"type": "BOOLEAN"},
                    "description": {"type": "STRING"},
                },
            },
        },
        "skills": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["personal_info", "education", "work_experience", "skills"],
}

RESUME_PARSE_INSTRUCTIONS = (
    "Extract all information from this resume. Return complete structured data matching the schema. "
    "Extract all education entries, all work experiences, and all skills mentioned. "
    "For dates, use YYYY-MM-DD format. "
    "For degree_type, use one of: high_school, bachelors, masters, phd, diploma. "
    "For employment_type, use one of: full_time, part_time, internship, freelance."
)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped or stripped.lower() in {"null", "none", "present", "n/a"}:
            return None
        return stripped
    return value


class PersonalInfo(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    current_city: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return _blank_to_none(value)


class ParsedEducation(BaseModel):
    degree_type: DegreeType | None = None
    degree_title: str | None = None
    institution_name: str | None = None
    field_of_study: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    is_current: bool = False
    grade_cgpa: float | None = None

    @field_validator("degree_type", mode="before")
    @classmethod
    def _known_degree(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if isinstance(value, str) and value.lower() in DEGREE_TYPES:
            return value.lower()
        return None

    @field_validator("degree_title", "institution_name", "field_of_study", "start_date", "end_date", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("is_current", mode="before")
    @classmethod
    def _bool(cls, value: Any) -> bool:
        return bool(value)


class ParsedExperience(BaseModel):
    job_title: str | None = None
    company_name: str | None = None
    employment_type: EmploymentType | None = None
    start_date: str | None = None
    end_date: str | None = None
    is_current: bool = False
    description: str | None = None

    @field_validator("employment_type", mode="before")
    @classmethod
    def _known_employment(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if isinstance(value, str) and value.lower() in EMPLOYMENT_TYPES:
            return value.lower()
        return None

    @field_validator("job_title", "company_name", "start_date", "end_date", "description", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("is_current", mode="before")
    @classmethod
    def _bool(cls, value: Any) -> bool:
        return bool(value)


class ParsedResume(BaseModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    education: list[ParsedEducation] = Field(default_factory=list)
    work_experience: list[ParsedExperience] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)

    @field_validator("personal_info", mode="before")
    @classmethod
    def _personal_info(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @field_validator("education", "work_experience", mode="before")
    @classmethod
    def _entries(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    @field_validator("skills", mode="before")
    @classmethod
    def _skills(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        cleaned: list[str] = []
        for item in value:
            if isinstance(item, str) and item.strip():
                cleaned.append(item.strip())
        return cleaned


class ParseResumeRequest(BaseModel):
    resume_id: int | None = None
    file_path: str | None = None
