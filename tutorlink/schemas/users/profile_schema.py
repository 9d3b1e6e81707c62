from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tutorlink.cores.input_validator import sanitize_string_field, sanitize_html_field


class StudentProfileUpdate(BaseModel):
    level: Optional[str] = Field(None, max_length=50)
    learning_goals: Optional[str] = Field(None, max_length=1000)
    timezone: Optional[str] = Field(None, max_length=64)

    _sanitize_level = field_validator('level')(sanitize_string_field)
    _sanitize_goals = field_validator('learning_goals')(sanitize_string_field)


class StudentProfileData(BaseModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    email: str
    image: Optional[str] = None
    level: Optional[str] = None
    learning_goals: Optional[str] = None
    timezone: Optional[str] = None


class StudentProfileResponse(BaseModel):
    success: bool
    message: str
    data: StudentProfileData


class TeacherProfileCreate(BaseModel):
    bio: Optional[str] = Field(None, max_length=2000)
    subjects: List[str] = []
    education: Optional[str] = Field(None, max_length=255)
    experience_years: int = Field(0, ge=0, le=80)
    hourly_rate: Decimal = Field(Decimal("0"), ge=0)
    timezone: Optional[str] = Field(None, max_length=64)

    _sanitize_bio = field_validator('bio')(sanitize_html_field)
    _sanitize_education = field_validator('education')(sanitize_string_field)

    @field_validator('subjects')
    @classmethod
    def clean_subjects(cls, value: List[str]) -> List[str]:
        cleaned = [sanitize_string_field(s) for s in value]
        return [s for s in cleaned if s]


class TeacherProfileUpdate(BaseModel):
    bio: Optional[str] = Field(None, max_length=2000)
    subjects: Optional[List[str]] = None
    education: Optional[str] = Field(None, max_length=255)
    experience_years: Optional[int] = Field(None, ge=0, le=80)
    hourly_rate: Optional[Decimal] = Field(None, ge=0)
    timezone: Optional[str] = Field(None, max_length=64)
    is_active: Optional[bool] = None

    _sanitize_bio = field_validator('bio')(sanitize_html_field)
    _sanitize_education = field_validator('education')(sanitize_string_field)

    @field_validator('subjects')
    @classmethod
    def clean_subjects(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        cleaned = [sanitize_string_field(s) for s in value]
        return [s for s in cleaned if s]


class TeacherProfileData(BaseModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    email: str
    image: Optional[str] = None
    bio: Optional[str] = None
    subjects: List[str] = []
    education: Optional[str] = None
    experience_years: int
    hourly_rate: float
    timezone: Optional[str] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class TeacherProfileResponse(BaseModel):
    success: bool
    message: str
    data: TeacherProfileData
