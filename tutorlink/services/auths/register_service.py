import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.cores.security import get_password_hash
from tutorlink.models import User, Role
from tutorlink.schemas.auths.register_shema import RegisterUserRequest
from tutorlink.services.auths.verification_service import send_email_verification
from tutorlink.services.validation.exception import (
    email_already_registered_exception, role_not_found_exception, handle_db_errors
)
from tutorlink.services.validation.register_validater import (
    validate_password, validate_privacy_policy_accepted, validate_name
)

logger = logging.getLogger(__name__)


@handle_db_errors
async def register_user(db: AsyncSession, request: RegisterUserRequest, role_name: str) -> User:
    """
    Registra un usuario con el rol indicado ("student" o "teacher").
    El perfil de docente se crea después desde /profile/teacher/.
    Envía el código para verificar el correo antes del primer inicio de sesión.
    """
    await validate_name(request.first_name, "first name")
    await validate_name(request.last_name, "last name")
    await validate_password(request.password)
    await validate_privacy_policy_accepted(request.privacy_policy_accepted)

    result = await db.execute(select(User).filter(User.email == request.email))
    if result.scalars().first():
        await email_already_registered_exception()

    result = await db.execute(select(Role).filter(Role.name == role_name))
    role = result.scalars().first()
    if not role:
        await role_not_found_exception(role_name)

    new_user = User(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password=get_password_hash(request.password),
        privacy_policy_accepted=request.privacy_policy_accepted,
        role_id=role.id,
    )
    db.add(new_user)
    await db.commit()

    result = await db.execute(select(User).where(User.id == new_user.id).execution_options(populate_existing=True))
    new_user = result.scalar_one()
    logger.info(f"Usuario registrado {new_user.email} con rol {role_name}")

    await send_email_verification(db, new_user)
    return new_user
