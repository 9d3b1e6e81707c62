import asyncio
import logging
import secrets
import string
import weakref
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.models import Booking, BookingStatus, Review
from tutorlink.schemas.bookings.booking_schema import BookingCreateRequest
from tutorlink.services.availability.availability_service import resolve_or_raise
from tutorlink.services.bookings.availability_resolver import to_server_local
from tutorlink.services.notifications.booking_email_service import (
    send_new_booking_email, send_booking_status_email
)
from tutorlink.services.teachers.teacher_profile_service import get_teacher_by_user
from tutorlink.services.users.student_profile_service import get_or_create_student
from tutorlink.services.validation.exception import (
    handle_db_errors, booking_not_found_exception, forbidden_booking_exception
)

logger = logging.getLogger(__name__)

# Un lock por docente: la verificación y el insert de una reserva no se intercalan.
# Las entradas desaparecen cuando ninguna petición retiene el lock.
_teacher_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()


def _teacher_lock(teacher_id: int) -> asyncio.Lock:
    lock = _teacher_locks.get(teacher_id)
    if lock is None:
        lock = asyncio.Lock()
        _teacher_locks[teacher_id] = lock
    return lock


# Transiciones que puede hacer el docente
TEACHER_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.NO_SHOW, BookingStatus.CANCELLED},
}

STUDENT_CANCELLABLE = {BookingStatus.PENDING, BookingStatus.CONFIRMED}


def booking_to_dict(booking: Booking, has_review: bool = False) -> dict:
    return {
        "id": booking.id,
        "teacher_id": booking.teacher_id,
        "student_id": booking.student_id,
        "teacher_name": booking.teacher.user.full_name if booking.teacher else None,
        "student_name": booking.student.user.full_name if booking.student else None,
        "start_time": booking.start_time,
        "end_time": booking.end_time,
        "status": booking.status,
        "payment_status": booking.payment_status,
        "meet_link": booking.meet_link,
        "notes": booking.notes,
        "has_review": has_review,
        "created_at": booking.created_at,
    }


async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
    result = await db.execute(
        select(Booking).where(Booking.id == booking_id).execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if not booking:
        await booking_not_found_exception()
    return booking


async def _reviewed_booking_ids(db: AsyncSession, booking_ids: List[int]) -> set:
    if not booking_ids:
        return set()
    result = await db.execute(select(Review.booking_id).where(Review.booking_id.in_(booking_ids)))
    return set(result.scalars().all())


@handle_db_errors
async def create_booking(db: AsyncSession, user_id: int, request: BookingCreateRequest) -> dict:
    """
    Crea una reserva PENDING si el resolver confirma que el horario está libre.
    La verificación se repite dentro del lock del docente justo antes de insertar.
    """
    student = await get_or_create_student(db, user_id)

    start = to_server_local(request.start_time)
    end = to_server_local(request.end_time)
    if start >= end:
        raise HTTPException(status_code=400, detail="La hora de inicio debe ser anterior a la hora de fin")
    if start <= datetime.now():
        raise HTTPException(status_code=400, detail="No se pueden reservar horarios en el pasado")

    lock = _teacher_lock(request.teacher_id)
    async with lock:
        await resolve_or_raise(db, request.teacher_id, start, end)

        booking = Booking(
            teacher_id=request.teacher_id,
            student_id=student.id,
            start_time=start,
            end_time=end,
            status=BookingStatus.PENDING,
            notes=request.notes,
        )
        db.add(booking)
        await db.commit()

    booking = await get_booking(db, booking.id)
    logger.info(f"Reserva {booking.id} creada: docente {booking.teacher_id}, estudiante {student.id}")

    await send_new_booking_email(booking)
    return booking_to_dict(booking)


@handle_db_errors
async def list_student_bookings(db: AsyncSession, user_id: int) -> List[dict]:
    student = await get_or_create_student(db, user_id)
    result = await db.execute(
        select(Booking).where(Booking.student_id == student.id).order_by(Booking.start_time.desc())
    )
    bookings = result.scalars().all()
    reviewed = await _reviewed_booking_ids(db, [b.id for b in bookings])
    return [booking_to_dict(b, has_review=b.id in reviewed) for b in bookings]


@handle_db_errors
async def cancel_student_booking(db: AsyncSession, user_id: int, booking_id: int, new_status: BookingStatus) -> dict:
    student = await get_or_create_student(db, user_id)
    booking = await get_booking(db, booking_id)
    if booking.student_id != student.id:
        await forbidden_booking_exception()

    if new_status != BookingStatus.CANCELLED:
        raise HTTPException(status_code=400, detail="El estudiante solo puede cancelar reservas")
    if booking.status not in STUDENT_CANCELLABLE:
        raise HTTPException(status_code=400, detail=f"No se puede cancelar una reserva en estado {booking.status.value}")

    booking.status = BookingStatus.CANCELLED
    await db.commit()
    logger.info(f"Reserva {booking.id} cancelada por el estudiante {student.id}")

    booking = await get_booking(db, booking_id)
    return booking_to_dict(booking)


@handle_db_errors
async def list_teacher_bookings(db: AsyncSession, user_id: int, status: Optional[BookingStatus] = None) -> List[dict]:
    teacher = await get_teacher_by_user(db, user_id)
    stmt = select(Booking).where(Booking.teacher_id == teacher.id)
    if status:
        stmt = stmt.where(Booking.status == status)
    result = await db.execute(stmt.order_by(Booking.start_time))
    bookings = result.scalars().all()
    reviewed = await _reviewed_booking_ids(db, [b.id for b in bookings])
    return [booking_to_dict(b, has_review=b.id in reviewed) for b in bookings]


@handle_db_errors
async def update_teacher_booking_status(db: AsyncSession, user_id: int, booking_id: int, new_status: BookingStatus) -> dict:
    teacher = await get_teacher_by_user(db, user_id)
    booking = await get_booking(db, booking_id)
    if booking.teacher_id != teacher.id:
        await forbidden_booking_exception()

    allowed = TEACHER_TRANSITIONS.get(booking.status, set())
    if new_status not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"Transición no permitida: {booking.status.value} -> {new_status.value}"
        )

    previous = booking.status
    booking.status = new_status
    await db.commit()
    logger.info(f"Reserva {booking.id}: {previous.value} -> {new_status.value} (docente {teacher.id})")

    booking = await get_booking(db, booking_id)
    await send_booking_status_email(booking)
    return booking_to_dict(booking)


def generate_meet_code() -> str:
    letters = string.ascii_lowercase
    part = lambda n: "".join(secrets.choice(letters) for _ in range(n))  # noqa: E731
    return f"{part(3)}-{part(4)}-{part(3)}"


@handle_db_errors
async def create_meet_link(db: AsyncSession, user_id: int, booking_id: int) -> dict:
    teacher = await get_teacher_by_user(db, user_id)
    booking = await get_booking(db, booking_id)
    if booking.teacher_id != teacher.id:
        await forbidden_booking_exception()

    if booking.status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
        raise HTTPException(status_code=400, detail="Solo se puede generar el enlace para reservas activas")

    booking.meet_link = f"https://meet.google.com/{generate_meet_code()}"
    await db.commit()

    booking = await get_booking(db, booking_id)
    return booking_to_dict(booking)
