"""
Códigos de un solo uso enviados por correo para verificar la cuenta y
restablecer la contraseña. Cada email tiene como máximo un código vigente por
propósito; pedir uno nuevo invalida el anterior.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.configs.settings import settings
from tutorlink.cores.security import get_password_hash
from tutorlink.cores.token import generate_verification_code, get_verification_expiration
from tutorlink.models import User, VerificationCode, VerificationPurpose
from tutorlink.schemas.auths.verification_schema import EmailRequest, PasswordResetVerify, VerifyEmailRequest
from tutorlink.services.notifications.account_email_service import (
    send_password_reset_email, send_verification_code_email
)
from tutorlink.services.validation.exception import handle_db_errors
from tutorlink.services.validation.register_validater import validate_password

logger = logging.getLogger(__name__)

# Misma respuesta exista o no la cuenta, para no revelar qué correos están registrados
RESET_REQUESTED_MESSAGE = "Si el correo está registrado, recibirás un código para restablecer tu contraseña"
RESEND_REQUESTED_MESSAGE = "Si el correo está registrado, recibirás un nuevo código de verificación"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


async def _get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def _active_code(db: AsyncSession, email: str, purpose: VerificationPurpose) -> Optional[VerificationCode]:
    result = await db.execute(
        select(VerificationCode).where(
            VerificationCode.email == email,
            VerificationCode.purpose == purpose,
            VerificationCode.used == False,  # noqa: E712
        ).order_by(VerificationCode.created_at.desc())
    )
    return result.scalars().first()


def _seconds_until_resend(code: VerificationCode) -> int:
    elapsed = (datetime.utcnow() - _as_utc(code.created_at)).total_seconds()
    return max(0, int(settings.VERIFICATION_RESEND_SECONDS - elapsed))


async def issue_code(db: AsyncSession, user: User, purpose: VerificationPurpose) -> str:
    await db.execute(
        delete(VerificationCode).where(
            VerificationCode.email == user.email,
            VerificationCode.purpose == purpose,
        )
    )
    code = generate_verification_code()
    db.add(VerificationCode(
        email=user.email,
        purpose=purpose,
        code=code,
        expires_at=get_verification_expiration(),
    ))
    await db.commit()
    logger.info(f"Código {purpose.value} emitido para el usuario {user.id}")
    return code


async def consume_code(db: AsyncSession, email: str, purpose: VerificationPurpose, code: str) -> VerificationCode:
    """
    Valida el código y lo marca como usado (sin commit; lo confirma quien llama).
    Cada intento fallido se guarda; al agotar los intentos el código queda invalidado.
    """
    verification = await _active_code(db, email, purpose)
    if not verification:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No hay código de verificación activo. Solicita uno nuevo"
        )

    now = datetime.utcnow()
    if _as_utc(verification.expires_at) < now:
        verification.used = True
        await db.commit()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Código expirado. Solicita uno nuevo"
        )

    if not secrets.compare_digest(verification.code, code):
        verification.attempts += 1
        verification.last_attempt = now
        remaining = settings.VERIFICATION_MAX_ATTEMPTS - verification.attempts
        if remaining <= 0:
            verification.used = True
            await db.commit()
            logger.warning(f"Código {purpose.value} invalidado por intentos fallidos ({email})")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Demasiados intentos fallidos. El código ha sido invalidado. Solicita uno nuevo"
            )
        await db.commit()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Código incorrecto. Te quedan {remaining} intentos"
        )

    verification.used = True
    return verification


async def send_email_verification(db: AsyncSession, user: User) -> bool:
    code = await issue_code(db, user, VerificationPurpose.EMAIL_VERIFICATION)
    return await send_verification_code_email(user, code)


@handle_db_errors
async def verify_email(db: AsyncSession, request: VerifyEmailRequest) -> dict:
    user = await _get_user_by_email(db, request.email)
    if user and user.email_verified:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El correo ya fue verificado")

    await consume_code(db, request.email, VerificationPurpose.EMAIL_VERIFICATION, request.code)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")

    user.email_verified = True
    await db.commit()
    logger.info(f"Correo verificado para el usuario {user.id}")
    return {"success": True, "message": "Correo verificado correctamente"}


@handle_db_errors
async def resend_verification(db: AsyncSession, request: EmailRequest) -> dict:
    user = await _get_user_by_email(db, request.email)
    if not user:
        return {"success": True, "message": RESEND_REQUESTED_MESSAGE}

    if user.email_verified:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El correo ya fue verificado")

    current = await _active_code(db, user.email, VerificationPurpose.EMAIL_VERIFICATION)
    if current:
        wait = _seconds_until_resend(current)
        if wait > 0:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Ya se envió un código recientemente. Intenta de nuevo en {wait} segundos"
            )

    await send_email_verification(db, user)
    return {"success": True, "message": RESEND_REQUESTED_MESSAGE}


@handle_db_errors
async def request_password_reset(db: AsyncSession, request: EmailRequest) -> dict:
    user = await _get_user_by_email(db, request.email)
    if not user or not user.is_active:
        logger.info("Recuperación de contraseña solicitada para un correo no registrado o inactivo")
        return {"success": True, "message": RESET_REQUESTED_MESSAGE}

    current = await _active_code(db, user.email, VerificationPurpose.PASSWORD_RESET)
    if current and _seconds_until_resend(current) > 0:
        logger.info(f"Recuperación repetida para el usuario {user.id}; se conserva el código vigente")
        return {"success": True, "message": RESET_REQUESTED_MESSAGE}

    code = await issue_code(db, user, VerificationPurpose.PASSWORD_RESET)
    await send_password_reset_email(user, code)
    return {"success": True, "message": RESET_REQUESTED_MESSAGE}


@handle_db_errors
async def reset_password(db: AsyncSession, request: PasswordResetVerify) -> dict:
    await validate_password(request.new_password)
    await consume_code(db, request.email, VerificationPurpose.PASSWORD_RESET, request.code)

    user = await _get_user_by_email(db, request.email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")

    user.password = get_password_hash(request.new_password)
    await db.commit()
    logger.info(f"Contraseña restablecida para el usuario {user.id}")
    return {"success": True, "message": "Contraseña actualizada correctamente"}
