from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from tutorlink.cores.input_validator import sanitize_string_field
from tutorlink.models.booking.payment import ReceiptStatus


class PaymentSubmitRequest(BaseModel):
    booking_id: int
    transaction_id: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0)
    payment_date: datetime
    bank_name: str = Field(..., min_length=1, max_length=100)
    account_number: Optional[str] = Field(None, max_length=50)
    receipt_image: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=1000)

    _sanitize_transaction = field_validator('transaction_id')(sanitize_string_field)
    _sanitize_bank = field_validator('bank_name')(sanitize_string_field)
    _sanitize_account = field_validator('account_number')(sanitize_string_field)
    _sanitize_notes = field_validator('notes')(sanitize_string_field)


class PaymentApproveRequest(BaseModel):
    notes: Optional[str] = None


class PaymentRejectRequest(BaseModel):
    reason: str = Field(..., max_length=255)

    _sanitize_reason = field_validator('reason')(sanitize_string_field)


class PaymentData(BaseModel):
    id: int
    booking_id: int
    student_id: int
    transaction_id: str
    amount: float
    payment_date: datetime
    bank_name: str
    account_number: Optional[str] = None
    receipt_image: Optional[str] = None
    notes: Optional[str] = None
    status: ReceiptStatus
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime


class PaymentResponse(BaseModel):
    success: bool
    message: str
    data: PaymentData


class PaymentListResponse(BaseModel):
    success: bool
    message: str
    data: List[PaymentData]
