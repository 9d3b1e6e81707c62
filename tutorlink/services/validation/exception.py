import functools
import logging

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


def handle_db_errors(func):
    """Decorador para capturar errores y simplificar manejo de excepciones"""
    @functools.wraps(func)
    async def wrapper(db, *args, **kwargs):
        try:
            return await func(db, *args, **kwargs)
        except HTTPException:
            await db.rollback()
            raise
        except Exception as e:
            await db.rollback()
            logger.error(f"Error en {func.__name__}: {str(e)}")
            raise HTTPException(status_code=500, detail="Error interno del servidor")
    return wrapper


async def email_already_registered_exception() -> None:
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Error registering email, please try another email."
    )


async def role_not_found_exception(role_name: str) -> None:
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="An error occurred during registration."
    )


async def teacher_profile_not_found_exception() -> None:
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Perfil de docente no encontrado"
    )


async def booking_not_found_exception() -> None:
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Reserva no encontrada"
    )


async def forbidden_booking_exception() -> None:
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="No tienes permiso sobre esta reserva"
    )
