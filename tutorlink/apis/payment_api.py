from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.apis.deps import get_db, student_required
from tutorlink.schemas.payments.payment_schema import PaymentListResponse, PaymentResponse, PaymentSubmitRequest
from tutorlink.services.payments.payment_service import list_student_payments, submit_payment

router = APIRouter()


@router.post("/", response_model=PaymentResponse, status_code=201)
async def submit_payment_route(
    data: PaymentSubmitRequest,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(student_required)
):
    """Registra el comprobante de transferencia; queda pendiente de revisión del administrador."""
    payment = await submit_payment(db, user_data["user_id"], data)
    return {"success": True, "message": "Comprobante enviado, pendiente de verificación", "data": payment}


@router.get("/student/", response_model=PaymentListResponse)
async def get_student_payments(db: AsyncSession = Depends(get_db), user_data: dict = Depends(student_required)):
    payments = await list_student_payments(db, user_data["user_id"])
    return {"success": True, "message": "Pagos obtenidos exitosamente", "data": payments}
