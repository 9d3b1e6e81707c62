from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tutorlink.cores.input_validator import sanitize_string_field
from tutorlink.models.booking.bookings import BookingStatus, PaymentStatus
from tutorlink.services.bookings.availability_resolver import to_server_local


class BookingCreateRequest(BaseModel):
    teacher_id: int
    start_time: datetime
    end_time: datetime
    notes: Optional[str] = Field(None, max_length=1000)

    _sanitize_notes = field_validator('notes')(sanitize_string_field)

    @model_validator(mode="after")
    def check_order(self):
        # Un valor con zona horaria y otro sin ella se comparan en hora local del servidor
        if to_server_local(self.start_time) >= to_server_local(self.end_time):
            raise ValueError("La hora de inicio debe ser anterior a la hora de fin")
        return self


class BookingStatusUpdateRequest(BaseModel):
    status: BookingStatus


class AdminBookingUpdateRequest(BaseModel):
    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None


class BookingData(BaseModel):
    id: int
    teacher_id: int
    student_id: int
    teacher_name: Optional[str] = None
    student_name: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    payment_status: PaymentStatus
    meet_link: Optional[str] = None
    notes: Optional[str] = None
    has_review: bool = False
    created_at: datetime


class BookingResponse(BaseModel):
    success: bool
    message: str
    data: BookingData


class BookingListResponse(BaseModel):
    success: bool
    message: str
    data: List[BookingData]
