"""Correos de la cuenta: verificación del email y recuperación de contraseña."""

from tutorlink.configs.settings import settings
from tutorlink.models import User
from tutorlink.services.notifications.booking_email_service import render_email, send_html_email


def _code_block(code: str) -> str:
    return f"""
        <div style="background-color: #f9f9f9; padding: 15px; border-radius: 5px; margin: 20px 0; text-align: center;">
            <p style="font-size: 28px; letter-spacing: 6px; margin: 0;"><strong>{code}</strong></p>
        </div>
        <p>Este código expirará en {settings.VERIFICATION_CODE_EXPIRE_MINUTES} minutos.</p>
    """


async def send_verification_code_email(user: User, code: str) -> bool:
    content = f"""
        <p>Gracias por registrarte. Usa este código para verificar tu correo:</p>
        {_code_block(code)}
    """
    return await send_html_email(
        "Verifica tu correo - Tutorlink",
        user.email,
        render_email("Verificación de correo", user.full_name, content),
    )


async def send_password_reset_email(user: User, code: str) -> bool:
    content = f"""
        <p>Hemos recibido una solicitud para restablecer tu contraseña.</p>
        {_code_block(code)}
        <p>Si no la solicitaste, ignora este correo.</p>
    """
    return await send_html_email(
        "Recuperación de contraseña - Tutorlink",
        user.email,
        render_email("Recuperación de contraseña", user.full_name, content),
    )
