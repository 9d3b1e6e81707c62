"""
Servicio de emails para notificaciones de reservas y pagos.
Un fallo al enviar se registra en el log y nunca interrumpe la petición.
"""

import logging

from fastapi_mail import MessageSchema, MessageType

from tutorlink.external.email_config import fast_mail
from tutorlink.models import Booking, Payment, ReceiptStatus

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    "PENDING": "pendiente",
    "CONFIRMED": "confirmada",
    "CANCELLED": "cancelada",
    "COMPLETED": "completada",
    "NO_SHOW": "marcada como inasistencia",
}


def _format_range(booking: Booking) -> str:
    return f"{booking.start_time.strftime('%d/%m/%Y %H:%M')} - {booking.end_time.strftime('%H:%M')}"


def render_email(title: str, name: str, content: str) -> str:
    return f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #4CAF50;">{title}</h2>
            <p>Hola <strong>{name}</strong>,</p>
            {content}
            <p style="margin-top: 30px;">
                Saludos,<br>
                <strong>El equipo de Tutorlink</strong>
            </p>
        </div>
    </body>
    </html>
    """


async def send_html_email(subject: str, recipient: str, body: str) -> bool:
    message = MessageSchema(
        subject=subject,
        recipients=[recipient],
        body=body,
        subtype=MessageType.html
    )
    try:
        await fast_mail.send_message(message)
        logger.info(f"Email '{subject}' enviado a {recipient}")
        return True
    except Exception as e:
        logger.error(f"Error enviando email '{subject}' a {recipient}: {str(e)}")
        return False


async def send_new_booking_email(booking: Booking) -> bool:
    """Avisa al docente de una nueva solicitud de reserva."""
    teacher_user = booking.teacher.user
    content = f"""
        <p>Tienes una nueva solicitud de clase.</p>
        <div style="background-color: #f9f9f9; padding: 15px; border-radius: 5px; margin: 20px 0;">
            <p><strong>Estudiante:</strong> {booking.student.user.full_name}</p>
            <p><strong>Fecha y hora:</strong> {_format_range(booking)}</p>
            <p><strong>Notas:</strong> {booking.notes or 'Sin notas'}</p>
        </div>
    """
    return await send_html_email(
        "Nueva reserva - Tutorlink",
        teacher_user.email,
        render_email("Nueva solicitud de reserva", teacher_user.full_name, content),
    )


async def send_booking_status_email(booking: Booking) -> bool:
    """Avisa al estudiante que el docente cambió el estado de su reserva."""
    student_user = booking.student.user
    label = STATUS_LABELS.get(booking.status.value, booking.status.value)
    content = f"""
        <p>Tu reserva con <strong>{booking.teacher.user.full_name}</strong> ha sido {label}.</p>
        <div style="background-color: #f9f9f9; padding: 15px; border-radius: 5px; margin: 20px 0;">
            <p><strong>Fecha y hora:</strong> {_format_range(booking)}</p>
            <p><strong>Enlace:</strong> {booking.meet_link or 'Se enviará próximamente'}</p>
        </div>
    """
    return await send_html_email(
        f"Reserva {label} - Tutorlink",
        student_user.email,
        render_email("Actualización de tu reserva", student_user.full_name, content),
    )


async def send_payment_decision_email(payment: Payment) -> bool:
    """Avisa al estudiante si su comprobante fue aprobado o rechazado."""
    booking = payment.booking
    student_user = booking.student.user
    if payment.status == ReceiptStatus.APPROVED:
        title = "¡Pago aprobado!"
        detail = "<p>Tu pago fue verificado y tu reserva está confirmada.</p>"
    else:
        title = "Pago rechazado"
        detail = f"<p>Tu comprobante fue rechazado. Motivo: {payment.rejection_reason}</p>"

    content = f"""
        {detail}
        <div style="background-color: #f9f9f9; padding: 15px; border-radius: 5px; margin: 20px 0;">
            <p><strong>Transacción:</strong> {payment.transaction_id}</p>
            <p><strong>Monto:</strong> ${float(payment.amount):.2f}</p>
            <p><strong>Clase:</strong> {_format_range(booking)}</p>
        </div>
    """
    return await send_html_email(
        f"{title} - Tutorlink",
        student_user.email,
        render_email(title, student_user.full_name, content),
    )
