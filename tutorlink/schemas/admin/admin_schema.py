from typing import List, Optional

from pydantic import BaseModel


class AdminStats(BaseModel):
    total_bookings: int
    pending_payments: int
    completed_bookings: int
    total_revenue: float
    active_teachers: int
    active_students: int


class AdminStatsResponse(BaseModel):
    success: bool
    message: str
    data: AdminStats


class AdminUserData(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: str
    is_active: bool


class AdminUserListResponse(BaseModel):
    success: bool
    message: str
    data: List[AdminUserData]


class AdminUserUpdateRequest(BaseModel):
    is_active: Optional[bool] = None
