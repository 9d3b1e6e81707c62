"""
Este bloque define la configuración de inicio (lifespan) y creación de la aplicación FastAPI.
Incluye tareas que deben ejecutarse al arrancar la aplicación, como la creación de tablas y datos iniciales.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from tutorlink.configs.settings import settings
from tutorlink.cores.db import create_tables, engine
from tutorlink.cores.rate_limiter import limiter, rate_limit_exceeded_handler
from tutorlink.cores.security_headers import SecurityHeadersMiddleware

import tutorlink.models  # noqa: F401  registra todas las tablas en Base.metadata

from tutorlink.scripts.databases.create_role import create_role
from tutorlink.scripts.databases.create_user_admin import create_admin_user

from tutorlink.apis.auth_api import router as auth_router
from tutorlink.apis.profile_api import router as profile_router
from tutorlink.apis.teachers_public_api import router as teachers_public_router
from tutorlink.apis.availability_api import router as availability_router
from tutorlink.apis.booking_api import router as booking_router
from tutorlink.apis.payment_api import router as payment_router
from tutorlink.apis.upload_api import router as upload_router
from tutorlink.apis.review_api import router as review_router
from tutorlink.apis.chat_api import router as chat_router
from tutorlink.apis.admin_api import router as admin_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Función que se ejecuta al iniciar la aplicación.
    - Crea todas las tablas en la base de datos si no existen.
    - Inserta los roles y el usuario administrador.
    """
    await create_tables(engine)
    await create_role()
    await create_admin_user()

    yield

    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Tutorlink",
        lifespan=lifespan
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
    app.include_router(profile_router, prefix="/api/profile", tags=["Profile"])
    app.include_router(teachers_public_router, prefix="/api/teachers", tags=["Public"])
    app.include_router(availability_router, prefix="/api/availability", tags=["Availability"])
    app.include_router(booking_router, prefix="/api/bookings", tags=["Bookings"])
    app.include_router(payment_router, prefix="/api/payments", tags=["Payments"])
    app.include_router(upload_router, prefix="/api/upload", tags=["Uploads"])
    app.include_router(review_router, prefix="/api/reviews", tags=["Reviews"])
    app.include_router(chat_router, prefix="/api/messages", tags=["Messages"])
    app.include_router(admin_router, prefix="/api/admin", tags=["Admin"])

    # Comprobantes e imágenes de perfil guardados por upload_service
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")

    return app
