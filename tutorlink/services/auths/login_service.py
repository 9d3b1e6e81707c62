import logging

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.configs.settings import settings
from tutorlink.cores.security import verify_and_upgrade_password
from tutorlink.cores.token import create_access_token
from tutorlink.models import User

logger = logging.getLogger(__name__)


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="Correo o contraseña incorrectos")

    valid, new_hash = verify_and_upgrade_password(password, user.password)
    if not valid:
        raise HTTPException(status_code=401, detail="Correo o contraseña incorrectos")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="La cuenta está desactivada")

    if settings.REQUIRE_EMAIL_VERIFICATION and not user.email_verified:
        raise HTTPException(status_code=403, detail="Debes verificar tu correo antes de iniciar sesión")

    if new_hash:
        user.password = new_hash
        await db.commit()
        logger.info(f"Hash de contraseña actualizado para el usuario {user.id}")

    return user


async def login_user(db: AsyncSession, email: str, password: str):
    user = await authenticate_user(db, email, password)

    token_data = {
        "user_id": user.id,
        "email": user.email,
        "role": user.role.name,
    }
    access_token = create_access_token(data=token_data)
    return access_token, user
