"""
Pagos manuales por transferencia: el estudiante envía el comprobante y un
administrador lo aprueba o rechaza. No hay integración con pasarelas.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.models import Booking, BookingStatus, Payment, PaymentStatus, ReceiptStatus
from tutorlink.schemas.payments.payment_schema import PaymentSubmitRequest
from tutorlink.services.bookings.booking_service import get_booking
from tutorlink.services.notifications.booking_email_service import send_payment_decision_email
from tutorlink.services.users.student_profile_service import get_or_create_student
from tutorlink.services.validation.exception import handle_db_errors, forbidden_booking_exception

logger = logging.getLogger(__name__)


def payment_to_dict(payment: Payment) -> dict:
    return {
        "id": payment.id,
        "booking_id": payment.booking_id,
        "student_id": payment.student_id,
        "transaction_id": payment.transaction_id,
        "amount": float(payment.amount),
        "payment_date": payment.payment_date,
        "bank_name": payment.bank_name,
        "account_number": payment.account_number,
        "receipt_image": payment.receipt_image,
        "notes": payment.notes,
        "status": payment.status,
        "approved_by": payment.approved_by,
        "approved_at": payment.approved_at,
        "rejection_reason": payment.rejection_reason,
        "created_at": payment.created_at,
    }


async def get_payment(db: AsyncSession, payment_id: int) -> Payment:
    result = await db.execute(
        select(Payment).where(Payment.id == payment_id).execution_options(populate_existing=True)
    )
    payment = result.scalar_one_or_none()
    if not payment:
        raise HTTPException(status_code=404, detail="Pago no encontrado")
    return payment


@handle_db_errors
async def submit_payment(db: AsyncSession, user_id: int, request: PaymentSubmitRequest) -> dict:
    student = await get_or_create_student(db, user_id)
    booking = await get_booking(db, request.booking_id)
    if booking.student_id != student.id:
        await forbidden_booking_exception()

    if booking.status != BookingStatus.PENDING:
        raise HTTPException(status_code=400, detail="Solo se puede pagar una reserva pendiente")

    result = await db.execute(
        select(Payment).where(
            Payment.booking_id == booking.id,
            Payment.status.in_([ReceiptStatus.PENDING, ReceiptStatus.APPROVED]),
        )
    )
    if result.scalars().first():
        raise HTTPException(status_code=400, detail="La reserva ya tiene un pago en revisión o aprobado")

    payment = Payment(
        booking_id=booking.id,
        student_id=student.id,
        transaction_id=request.transaction_id,
        amount=request.amount,
        payment_date=request.payment_date,
        bank_name=request.bank_name,
        account_number=request.account_number,
        receipt_image=request.receipt_image,
        notes=request.notes,
        status=ReceiptStatus.PENDING,
    )
    db.add(payment)
    booking.payment_status = PaymentStatus.PENDING
    await db.commit()
    logger.info(f"Comprobante {payment.id} enviado para la reserva {booking.id}")

    payment = await get_payment(db, payment.id)
    return payment_to_dict(payment)


@handle_db_errors
async def list_student_payments(db: AsyncSession, user_id: int) -> List[dict]:
    student = await get_or_create_student(db, user_id)
    result = await db.execute(
        select(Payment).where(Payment.student_id == student.id).order_by(Payment.created_at.desc())
    )
    return [payment_to_dict(p) for p in result.scalars().all()]


@handle_db_errors
async def list_payments(db: AsyncSession, status: Optional[ReceiptStatus] = None) -> List[dict]:
    stmt = select(Payment)
    if status:
        stmt = stmt.where(Payment.status == status)
    result = await db.execute(stmt.order_by(Payment.created_at.desc()))
    return [payment_to_dict(p) for p in result.scalars().all()]


def _ensure_pending(payment: Payment) -> None:
    if payment.status != ReceiptStatus.PENDING:
        raise HTTPException(status_code=400, detail=f"El pago ya fue procesado ({payment.status.value})")


@handle_db_errors
async def approve_payment(db: AsyncSession, admin_id: int, payment_id: int, notes: Optional[str] = None) -> dict:
    payment = await get_payment(db, payment_id)
    _ensure_pending(payment)

    # Una reserva cancelada liberó su horario; confirmarla podría solaparse con otra
    if payment.booking.status != BookingStatus.PENDING:
        raise HTTPException(
            status_code=400,
            detail=f"No se puede aprobar el pago de una reserva {payment.booking.status.value}"
        )

    payment.status = ReceiptStatus.APPROVED
    payment.approved_by = admin_id
    payment.approved_at = datetime.utcnow()
    if notes:
        payment.notes = notes

    booking: Booking = payment.booking
    booking.status = BookingStatus.CONFIRMED
    booking.payment_status = PaymentStatus.PAID
    await db.commit()
    logger.info(f"Pago {payment.id} aprobado por admin {admin_id}; reserva {booking.id} confirmada")

    payment = await get_payment(db, payment_id)
    await send_payment_decision_email(payment)
    return payment_to_dict(payment)


@handle_db_errors
async def reject_payment(db: AsyncSession, admin_id: int, payment_id: int, reason: str) -> dict:
    if not reason:
        raise HTTPException(status_code=400, detail="Debe indicar el motivo del rechazo")

    payment = await get_payment(db, payment_id)
    _ensure_pending(payment)

    payment.status = ReceiptStatus.REJECTED
    payment.rejection_reason = reason

    booking: Booking = payment.booking
    booking.status = BookingStatus.CANCELLED
    booking.payment_status = PaymentStatus.FAILED
    await db.commit()
    logger.info(f"Pago {payment.id} rechazado por admin {admin_id}: {reason}")

    payment = await get_payment(db, payment_id)
    await send_payment_decision_email(payment)
    return payment_to_dict(payment)
