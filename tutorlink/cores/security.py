from typing import Optional, Tuple

from passlib.context import CryptContext


# Hashes con menos rondas se marcan como obsoletos y se regeneran al iniciar sesión
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=12,
    bcrypt__min_rounds=12,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_and_upgrade_password(plain_password: str, hashed_password: str) -> Tuple[bool, Optional[str]]:
    """
    Verifica la contraseña y, si el hash almacenado quedó obsoleto,
    devuelve uno nuevo para guardarlo. El segundo valor es None si no hace falta.
    """
    return pwd_context.verify_and_update(plain_password, hashed_password)
