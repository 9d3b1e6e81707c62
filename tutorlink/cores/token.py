import secrets
import string
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException
from jose import JWTError, jwt

from tutorlink.configs.settings import settings


SECRET_KEY = settings.SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES


"""
Genera un token JWT codificado con la información proporcionada en `data`.
    - El token incluye "type" y la clave de expiración "exp" para validar su vigencia.
"""
def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"type": "access", "exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str):
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Token inválido o expirado")


VERIFICATION_CODE_LENGTH = 6


def generate_verification_code(length: int = VERIFICATION_CODE_LENGTH) -> str:
    """Código numérico para verificación de correo y recuperación de contraseña."""
    return "".join(secrets.choice(string.digits) for _ in range(length))


def get_verification_expiration() -> datetime:
    # Naive UTC, igual que los timestamps de los modelos
    return datetime.utcnow() + timedelta(minutes=settings.VERIFICATION_CODE_EXPIRE_MINUTES)
