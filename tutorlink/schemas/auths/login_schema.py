"""
Modelo que representa la estructura de datos recibida y enviada en la api de login
"""

from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginData(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    email: EmailStr
    first_name: str
    last_name: str
    role: str


class LoginResponse(BaseModel):
    success: bool
    message: str
    data: LoginData
