from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.apis.deps import admin_required, get_db
from tutorlink.models import BookingStatus, ReceiptStatus
from tutorlink.schemas.admin.admin_schema import (
    AdminStatsResponse, AdminUserListResponse, AdminUserUpdateRequest
)
from tutorlink.schemas.bookings.booking_schema import (
    AdminBookingUpdateRequest, BookingListResponse, BookingResponse
)
from tutorlink.schemas.payments.payment_schema import (
    PaymentApproveRequest, PaymentListResponse, PaymentRejectRequest, PaymentResponse
)
from tutorlink.services.admin import admin_service
from tutorlink.services.payments.payment_service import approve_payment, list_payments, reject_payment

router = APIRouter(dependencies=[Depends(admin_required)])


@router.get("/stats/", response_model=AdminStatsResponse)
async def get_stats(db: AsyncSession = Depends(get_db)):
    stats = await admin_service.get_stats(db)
    return {"success": True, "message": "Estadísticas obtenidas exitosamente", "data": stats}


@router.get("/payments/", response_model=PaymentListResponse)
async def get_payments(status: Optional[ReceiptStatus] = None, db: AsyncSession = Depends(get_db)):
    payments = await list_payments(db, status)
    return {"success": True, "message": "Pagos obtenidos exitosamente", "data": payments}


@router.post("/payments/{payment_id}/approve", response_model=PaymentResponse)
async def approve_payment_route(
    payment_id: int,
    data: Optional[PaymentApproveRequest] = None,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(admin_required)
):
    notes = data.notes if data else None
    payment = await approve_payment(db, user_data["user_id"], payment_id, notes)
    return {"success": True, "message": "Pago aprobado y reserva confirmada", "data": payment}


@router.post("/payments/{payment_id}/reject", response_model=PaymentResponse)
async def reject_payment_route(
    payment_id: int,
    data: PaymentRejectRequest,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(admin_required)
):
    payment = await reject_payment(db, user_data["user_id"], payment_id, data.reason)
    return {"success": True, "message": "Pago rechazado", "data": payment}


@router.get("/bookings/", response_model=BookingListResponse)
async def get_bookings(status: Optional[BookingStatus] = None, db: AsyncSession = Depends(get_db)):
    bookings = await admin_service.list_bookings(db, status)
    return {"success": True, "message": "Reservas obtenidas exitosamente", "data": bookings}


@router.patch("/bookings/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: int,
    data: AdminBookingUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(admin_required)
):
    booking = await admin_service.update_booking(db, user_data["user_id"], booking_id, data)
    return {"success": True, "message": "Reserva actualizada", "data": booking}


@router.get("/users/", response_model=AdminUserListResponse)
async def get_users(role: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    users = await admin_service.list_users(db, role)
    return {"success": True, "message": "Usuarios obtenidos exitosamente", "data": users}


@router.patch("/users/{user_id}")
async def update_user(
    user_id: int,
    data: AdminUserUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(admin_required)
):
    user = await admin_service.update_user(db, user_data["user_id"], user_id, data)
    return {"success": True, "message": "Usuario actualizado", "data": user}
