import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.cores.db import async_session
from tutorlink.models.common.role import Role

logger = logging.getLogger(__name__)

ROLES = [
    ("teacher", "Docente que publica disponibilidad e imparte clases"),
    ("student", "Estudiante que reserva clases con los docentes"),
    ("admin", "Administra pagos, reservas y usuarios"),
]


async def create_role(session_factory=async_session):
    db: AsyncSession = session_factory()

    try:
        result = await db.execute(select(Role.name))
        existing = set(result.scalars().all())

        missing = [Role(name=name, description=description) for name, description in ROLES if name not in existing]
        if missing:
            db.add_all(missing)
            await db.commit()
            logger.info(f"Roles creados: {', '.join(r.name for r in missing)}")
        else:
            logger.info("Los roles ya existen.")

    except Exception as e:
        await db.rollback()
        logger.error(f"Error creando roles: {e}")
        raise

    finally:
        await db.close()
