"""
Motor y sesiones asíncronas de SQLAlchemy.

La aplicación usa el motor global construido desde ``SQLALCHEMY_DATABASE_URI``;
las pruebas construyen su propio motor en memoria con las mismas funciones.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from tutorlink.configs.settings import settings

Base = declarative_base()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    options = {"echo": echo}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            # Una base en memoria solo existe dentro de su conexión
            options["poolclass"] = StaticPool
    return create_async_engine(url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


async def create_tables(bind: AsyncEngine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)
async_session = build_session_factory(engine)
