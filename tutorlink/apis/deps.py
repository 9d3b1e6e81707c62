from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Header
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.cores.db import async_session
from tutorlink.cores.token import verify_token

"""
`get_db` proporciona una sesión de base de datos asincrónica por petición.
Se usa como dependencia en rutas de FastAPI para interactuar con la base de datos sin preocuparse
por abrir o cerrar la conexión manualmente.
"""
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    session = async_session()
    try:
        yield session
    finally:
        await session.close()


async def public_access():
    pass


async def auth_required(authorization: Optional[str] = Header(None)) -> dict:
    if not authorization:
        raise HTTPException(status_code=401, detail="Token not provided")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token format")

    if scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid token format")

    payload = verify_token(token)

    if not payload.get("user_id") or not payload.get("role"):
        raise HTTPException(status_code=401, detail="Invalid data in token")
    return payload


def require_role(*roles: str):
    """Dependencia que exige uno de los roles indicados en el token."""
    async def checker(user_data: dict = Depends(auth_required)) -> dict:
        if user_data.get("role") not in roles:
            raise HTTPException(status_code=403, detail="You don't have permission for this action")
        return user_data

    return checker


student_required = require_role("student")
teacher_required = require_role("teacher")
admin_required = require_role("admin")
