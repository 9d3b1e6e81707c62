import logging

from sqlalchemy.future import select

from tutorlink.configs.settings import settings
from tutorlink.cores.db import async_session
from tutorlink.cores.security import get_password_hash
from tutorlink.models.common.role import Role
from tutorlink.models.users.user import User

logger = logging.getLogger(__name__)


async def create_admin_user(session_factory=async_session):
    async with session_factory() as db:
        if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
            logger.warning("ADMIN_EMAIL o ADMIN_PASSWORD no definidos; no se crea el administrador.")
            return

        result = await db.execute(select(User).where(User.email == settings.ADMIN_EMAIL))
        if result.scalar_one_or_none():
            logger.info("El usuario administrador ya existe.")
            return

        role_result = await db.execute(select(Role).where(Role.name == "admin"))
        role = role_result.scalar_one_or_none()
        if not role:
            logger.warning("Rol 'admin' no encontrado. Crea los roles primero.")
            return

        db.add(User(
            email=settings.ADMIN_EMAIL,
            password=get_password_hash(settings.ADMIN_PASSWORD),
            first_name=settings.ADMIN_FIRST_NAME,
            last_name=settings.ADMIN_LAST_NAME,
            role_id=role.id,
            privacy_policy_accepted=True,
            email_verified=True
        ))
        await db.commit()
        logger.info("Usuario administrador creado.")
