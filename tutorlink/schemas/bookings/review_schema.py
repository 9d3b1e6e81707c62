from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from tutorlink.cores.input_validator import sanitize_string_field


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=500)

    _sanitize_comment = field_validator('comment')(sanitize_string_field)


class ReviewData(BaseModel):
    id: int
    booking_id: int
    teacher_id: int
    student_id: int
    student_name: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class ReviewResponse(BaseModel):
    success: bool
    message: str
    data: ReviewData


class TeacherReviewsData(BaseModel):
    teacher_id: int
    average_rating: float
    total_reviews: int
    reviews: List[ReviewData]


class TeacherReviewsResponse(BaseModel):
    success: bool
    message: str
    data: TeacherReviewsData
