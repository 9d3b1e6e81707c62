import logging

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.models import Student, User
from tutorlink.schemas.users.profile_schema import StudentProfileUpdate
from tutorlink.services.validation.exception import handle_db_errors

logger = logging.getLogger(__name__)


async def get_student_by_user(db: AsyncSession, user_id: int):
    result = await db.execute(
        select(Student).where(Student.user_id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_or_create_student(db: AsyncSession, user_id: int) -> Student:
    """Devuelve el perfil de estudiante y lo crea vacío en el primer acceso."""
    student = await get_student_by_user(db, user_id)
    if student:
        return student

    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Usuario no encontrado")

    db.add(Student(user_id=user_id))
    await db.commit()
    logger.info(f"Perfil de estudiante creado para usuario {user_id}")
    return await get_student_by_user(db, user_id)


def student_to_dict(student: Student) -> dict:
    return {
        "id": student.id,
        "user_id": student.user_id,
        "first_name": student.user.first_name,
        "last_name": student.user.last_name,
        "email": student.user.email,
        "image": student.user.image,
        "level": student.level,
        "learning_goals": student.learning_goals,
        "timezone": student.timezone,
    }


@handle_db_errors
async def get_student_profile(db: AsyncSession, user_id: int) -> dict:
    student = await get_or_create_student(db, user_id)
    return student_to_dict(student)


@handle_db_errors
async def update_student_profile(db: AsyncSession, user_id: int, data: StudentProfileUpdate) -> dict:
    student = await get_or_create_student(db, user_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(student, field, value)

    await db.commit()
    student = await get_student_by_user(db, user_id)
    return student_to_dict(student)
