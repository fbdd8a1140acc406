from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Proficiency = Literal["beginner", "intermediate", "advanced", "expert"]


class ProfileEducationEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    degree: str | None = None
    institution: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    year: str | int | None = None


class ProfileExperienceEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    company: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    is_current: bool | None = None
    duration: str | None = None
    description: str | None = None


class ProfileUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    date_of_birth: str | None = None
    current_city: str | None = None
    bio: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    profile_picture: str | None = None
    current_job: str | None = None
    dream_job: str | None = None
    years_of_experience: int | None = None
    preferred_location: str | None = None
    salary_expectation: str | None = None
    education: list[ProfileEducationEntry] = Field(default_factory=list)
    work_experience: list[ProfileExperienceEntry] = Field(default_factory=list)

    def as_payload(self) -> dict[str, Any]:
        return self.model_dump()


class SkillNamesRequest(BaseModel):
    skills: list[str] = Field(default_factory=list)


class EducationRecord(BaseModel):
    degree_type: str | None = None
    degree_title: str | None = None
    institution_name: str | None = None
    field_of_study: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    is_current: bool | None = None
    grade_cgpa: float | None = None


class ExperienceRecord(BaseModel):
    job_title: str | None = None
    company_name: str | None = None
    employment_type: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    is_current: bool | None = None
    description: str | None = None


class UserSkillCreate(BaseModel):
    skill_name: str | None = None
    proficiency_level: Proficiency = "intermediate"
    years_of_experience: float = Field(default=0, ge=0, le=80)


class UserSkillUpdate(BaseModel):
    proficiency_level: Proficiency | None = None
    years_of_experience: float | None = Field(default=None, ge=0, le=80)


class UserUpdateRequest(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    current_city: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None


class EducationCreateRequest(EducationRecord):
    user_id: str | None = None


class WorkExperienceCreateRequest(ExperienceRecord):
    user_id: str | None = None


class UserSkillLinkRequest(BaseModel):
    user_id: str | None = None
    skill_id: int | None = None
    proficiency_level: str | None = None
    years_of_experience: float | None = None
    source: str | None = None


class SkillCatalogCreate(BaseModel):
    skill_name: str | None = None
    skill_category: str | None = None


class AddSkillRequest(BaseModel):
    skillName: str | None = None
    proficiency: Proficiency | None = None
