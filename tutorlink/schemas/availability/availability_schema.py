from typing import List, Optional, Union

from pydantic import BaseModel, Field

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


class AvailabilityWindowIn(BaseModel):
    day_of_week: Union[int, str]  # 0..6 (0 = domingo) o "Monday"
    start_time: str                # "09:00"
    end_time: str                  # "17:00"
    is_available: bool = True


class AvailabilitySaveRequest(BaseModel):
    availabilities: List[AvailabilityWindowIn]


class AvailabilityWindowOut(BaseModel):
    id: int
    day_of_week: int
    day_name: str
    start_time: str
    end_time: str
    is_available: bool


class AvailabilityGridSlot(BaseModel):
    id: str               # "Monday-09:00"
    day_of_week: str
    start_time: str
    end_time: str
    is_available: bool


class AvailabilityCheckRequest(BaseModel):
    date: str = Field(..., examples=["2025-03-03"])
    time_slot: str = Field(..., examples=["10:00 - 11:00"])


class AgendaSlot(BaseModel):
    start_time: str
    end_time: str
    status: str  # "available" | "occupied"
    availability_id: Optional[int] = None


class AgendaDay(BaseModel):
    date: str
    day_name: str
    slots: List[AgendaSlot]
    total_slots: int
    available_slots: int
    occupied_slots: int


class TeacherWeeklyAgenda(BaseModel):
    teacher_id: int
    teacher_name: str
    week_start: str
    week_end: str
    days: List[AgendaDay]


class TeacherAgendaResponse(BaseModel):
    success: bool
    message: str
    data: TeacherWeeklyAgenda
