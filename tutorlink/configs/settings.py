from typing import List

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

"""
Se carga automáticamente desde el archivo `.env` o las variables de entorno del sistema.
    - Define la configuración principal de la aplicación (base de datos, seguridad, correo).
    - Todos los campos tienen un valor por defecto de desarrollo para poder
      importar la aplicación y correr las pruebas sin `.env`.
"""
class Settings(BaseSettings):
    SQLALCHEMY_DATABASE_URI: str = "sqlite+aiosqlite:///./tutorlink.db"
    SECRET_KEY: str = "dev-secret-key-change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    REQUIRE_EMAIL_VERIFICATION: bool = True
    VERIFICATION_CODE_EXPIRE_MINUTES: int = 15
    VERIFICATION_MAX_ATTEMPTS: int = 3
    VERIFICATION_RESEND_SECONDS: int = 60

    ADMIN_EMAIL: str = "admin@tutorlink.com"
    ADMIN_PASSWORD: str = "Admin123!!"
    ADMIN_FIRST_NAME: str = "Admin"
    ADMIN_LAST_NAME: str = "Tutorlink"

    MAIL_ENABLED: bool = False
    MAIL_USERNAME: str = ""
    MAIL_PASSWORD: str = ""
    MAIL_FROM: str = "no-reply@tutorlink.com"
    MAIL_FROM_NAME: str = "Tutorlink"
    MAIL_PORT: int = 587
    MAIL_SERVER: str = "localhost"
    MAIL_STARTTLS: bool = True
    MAIL_SSL_TLS: bool = False

    UPLOAD_DIR: str = "uploads"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_LOGIN: str = "10/minute"
    RATE_LIMIT_BOOKING: str = "20/minute"

    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
