from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.apis.deps import get_db, public_access
from tutorlink.configs.settings import settings
from tutorlink.cores.rate_limiter import limiter
from tutorlink.schemas.auths.login_schema import LoginRequest, LoginResponse
from tutorlink.schemas.auths.register_shema import RegisterUserRequest, RegisterUserResponse
from tutorlink.schemas.auths.verification_schema import (
    EmailRequest, MessageResponse, PasswordResetVerify, VerifyEmailRequest
)
from tutorlink.services.auths.login_service import login_user
from tutorlink.services.auths.register_service import register_user
from tutorlink.services.auths.verification_service import (
    request_password_reset, resend_verification, reset_password, verify_email
)

router = APIRouter()


def _registered(new_user) -> dict:
    return {
        "success": True,
        "message": "Successfully registered user.",
        "data": {
            "id": new_user.id,
            "first_name": new_user.first_name,
            "last_name": new_user.last_name,
            "email": new_user.email,
            "role": new_user.role.name,
        }
    }


"""
Ruta para registrar un nuevo estudiante.
    - Crea un usuario con rol "student".
    - Retorna datos básicos del usuario registrado.
"""
@router.post("/register/student/", response_model=RegisterUserResponse, dependencies=[Depends(public_access)])
async def register_student_route(data: RegisterUserRequest, db: AsyncSession = Depends(get_db)):
    new_user = await register_user(db, data, "student")
    return _registered(new_user)


"""
Ruta para registrar un nuevo docente.
    - Crea un usuario con rol "teacher"; el perfil docente se completa después.
"""
@router.post("/register/teacher/", response_model=RegisterUserResponse, dependencies=[Depends(public_access)])
async def register_teacher_route(data: RegisterUserRequest, db: AsyncSession = Depends(get_db)):
    new_user = await register_user(db, data, "teacher")
    return _registered(new_user)


"""
Ruta para iniciar sesión.
    - Verifica las credenciales y genera un token de acceso.
    - Devuelve el token, tipo de token y algunos datos del usuario.
"""
@router.post("/login/", response_model=LoginResponse, dependencies=[Depends(public_access)])
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def login(request: Request, data: LoginRequest, db: AsyncSession = Depends(get_db)):
    access_token, user = await login_user(db, data.email, data.password)
    return {
        "success": True,
        "message": "Login exitoso",
        "data": {
            "access_token": access_token,
            "token_type": "bearer",
            "user_id": user.id,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "role": user.role.name,
        }
    }


"""
Verificación de correo.
    - El código se envía al registrarse; sin verificar no se puede iniciar sesión.
"""
@router.post("/verify-email/", response_model=MessageResponse, dependencies=[Depends(public_access)])
async def verify_email_route(data: VerifyEmailRequest, db: AsyncSession = Depends(get_db)):
    return await verify_email(db, data)


@router.post("/verify-email/resend/", response_model=MessageResponse, dependencies=[Depends(public_access)])
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def resend_verification_route(request: Request, data: EmailRequest, db: AsyncSession = Depends(get_db)):
    return await resend_verification(db, data)


"""
Recuperación de contraseña.
    - /request siempre responde igual para no revelar qué correos existen.
    - /verify cambia la contraseña con el código recibido por correo.
"""
@router.post("/password-reset/request/", response_model=MessageResponse, dependencies=[Depends(public_access)])
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def request_password_reset_route(request: Request, data: EmailRequest, db: AsyncSession = Depends(get_db)):
    return await request_password_reset(db, data)


@router.post("/password-reset/verify/", response_model=MessageResponse, dependencies=[Depends(public_access)])
async def reset_password_route(data: PasswordResetVerify, db: AsyncSession = Depends(get_db)):
    return await reset_password(db, data)
