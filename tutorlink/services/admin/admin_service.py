import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.models import (
    Booking, BookingStatus, Payment, ReceiptStatus, Role, Teacher, User
)
from tutorlink.schemas.admin.admin_schema import AdminUserUpdateRequest
from tutorlink.schemas.bookings.booking_schema import AdminBookingUpdateRequest
from tutorlink.services.bookings.booking_service import booking_to_dict, get_booking
from tutorlink.services.validation.exception import handle_db_errors

logger = logging.getLogger(__name__)


async def _scalar(db: AsyncSession, stmt) -> int:
    result = await db.execute(stmt)
    return result.scalar() or 0


@handle_db_errors
async def get_stats(db: AsyncSession) -> dict:
    total_bookings = await _scalar(db, select(func.count(Booking.id)))
    pending_payments = await _scalar(
        db, select(func.count(Payment.id)).where(Payment.status == ReceiptStatus.PENDING)
    )
    completed_bookings = await _scalar(
        db, select(func.count(Booking.id)).where(Booking.status == BookingStatus.COMPLETED)
    )
    total_revenue = await _scalar(
        db, select(func.sum(Payment.amount)).where(Payment.status == ReceiptStatus.APPROVED)
    )
    active_teachers = await _scalar(
        db, select(func.count(Teacher.id)).join(User, User.id == Teacher.user_id)
        .where(Teacher.is_active == True, User.is_active == True)  # noqa: E712
    )
    # Estudiantes con al menos una reserva
    active_students = await _scalar(db, select(func.count(func.distinct(Booking.student_id))))

    return {
        "total_bookings": total_bookings,
        "pending_payments": pending_payments,
        "completed_bookings": completed_bookings,
        "total_revenue": float(total_revenue),
        "active_teachers": active_teachers,
        "active_students": active_students,
    }


@handle_db_errors
async def list_bookings(db: AsyncSession, status: Optional[BookingStatus] = None) -> List[dict]:
    stmt = select(Booking)
    if status:
        stmt = stmt.where(Booking.status == status)
    result = await db.execute(stmt.order_by(Booking.start_time.desc()))
    return [booking_to_dict(b) for b in result.scalars().all()]


@handle_db_errors
async def update_booking(db: AsyncSession, admin_id: int, booking_id: int, data: AdminBookingUpdateRequest) -> dict:
    """El administrador puede fijar cualquier estado; no se validan transiciones."""
    if data.status is None and data.payment_status is None:
        raise HTTPException(status_code=400, detail="No se indicó ningún cambio")

    booking = await get_booking(db, booking_id)
    if data.status is not None:
        booking.status = data.status
    if data.payment_status is not None:
        booking.payment_status = data.payment_status
    await db.commit()
    logger.info(f"Reserva {booking_id} actualizada por admin {admin_id}: {data.model_dump(exclude_none=True)}")

    booking = await get_booking(db, booking_id)
    return booking_to_dict(booking)


def admin_user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "role": user.role.name,
        "is_active": user.is_active,
    }


@handle_db_errors
async def list_users(db: AsyncSession, role: Optional[str] = None) -> List[dict]:
    stmt = select(User)
    if role:
        stmt = stmt.join(Role, Role.id == User.role_id).where(Role.name == role)
    result = await db.execute(stmt.order_by(User.id))
    return [admin_user_to_dict(u) for u in result.unique().scalars().all()]


@handle_db_errors
async def update_user(db: AsyncSession, admin_id: int, user_id: int, data: AdminUserUpdateRequest) -> dict:
    if user_id == admin_id and data.is_active is False:
        raise HTTPException(status_code=400, detail="No puedes desactivar tu propia cuenta")

    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Usuario no encontrado")

    if data.is_active is not None:
        user.is_active = data.is_active
    await db.commit()
    logger.info(f"Usuario {user_id} actualizado por admin {admin_id}: is_active={user.is_active}")
    return admin_user_to_dict(user)
