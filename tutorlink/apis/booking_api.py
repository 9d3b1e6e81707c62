from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.apis.deps import get_db, student_required, teacher_required
from tutorlink.configs.settings import settings
from tutorlink.cores.rate_limiter import limiter
from tutorlink.models import BookingStatus
from tutorlink.schemas.bookings.booking_schema import (
    BookingCreateRequest, BookingListResponse, BookingResponse, BookingStatusUpdateRequest
)
from tutorlink.services.bookings.booking_service import (
    cancel_student_booking, create_booking, create_meet_link, list_student_bookings,
    list_teacher_bookings, update_teacher_booking_status,
)

router = APIRouter()


@router.post("/", response_model=BookingResponse, status_code=201)
@limiter.limit(settings.RATE_LIMIT_BOOKING)
async def create_booking_route(
    request: Request,
    data: BookingCreateRequest,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(student_required)
):
    """
    Crea una reserva PENDING.
    Responde 404 si el docente no existe y 400 si el horario no está disponible.
    """
    booking = await create_booking(db, user_data["user_id"], data)
    return {"success": True, "message": "Reserva creada exitosamente", "data": booking}


@router.get("/student/", response_model=BookingListResponse)
async def get_student_bookings(db: AsyncSession = Depends(get_db), user_data: dict = Depends(student_required)):
    bookings = await list_student_bookings(db, user_data["user_id"])
    return {"success": True, "message": "Reservas obtenidas exitosamente", "data": bookings}


@router.patch("/student/{booking_id}", response_model=BookingResponse)
async def update_student_booking(
    booking_id: int,
    data: BookingStatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(student_required)
):
    booking = await cancel_student_booking(db, user_data["user_id"], booking_id, data.status)
    return {"success": True, "message": "Reserva cancelada", "data": booking}


@router.get("/teacher/", response_model=BookingListResponse)
async def get_teacher_bookings(
    status: Optional[BookingStatus] = None,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(teacher_required)
):
    bookings = await list_teacher_bookings(db, user_data["user_id"], status)
    return {"success": True, "message": "Reservas obtenidas exitosamente", "data": bookings}


@router.patch("/teacher/{booking_id}", response_model=BookingResponse)
async def update_teacher_booking(
    booking_id: int,
    data: BookingStatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(teacher_required)
):
    booking = await update_teacher_booking_status(db, user_data["user_id"], booking_id, data.status)
    return {"success": True, "message": "Estado de la reserva actualizado", "data": booking}


@router.post("/teacher/{booking_id}/meet-link", response_model=BookingResponse)
async def generate_meet_link(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(teacher_required)
):
    booking = await create_meet_link(db, user_data["user_id"], booking_id)
    return {"success": True, "message": "Enlace de la clase generado", "data": booking}
