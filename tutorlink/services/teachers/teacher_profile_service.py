import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.models import Teacher, Review, Availability
from tutorlink.schemas.users.profile_schema import TeacherProfileCreate, TeacherProfileUpdate
from tutorlink.services.availability.window_utils import window_to_dict
from tutorlink.services.validation.exception import handle_db_errors, teacher_profile_not_found_exception

logger = logging.getLogger(__name__)


def split_subjects(subjects: Optional[str]) -> List[str]:
    if not subjects:
        return []
    return [s.strip() for s in subjects.split(",") if s.strip()]


def teacher_to_dict(teacher: Teacher) -> dict:
    return {
        "id": teacher.id,
        "user_id": teacher.user_id,
        "first_name": teacher.user.first_name,
        "last_name": teacher.user.last_name,
        "email": teacher.user.email,
        "image": teacher.user.image,
        "bio": teacher.bio,
        "subjects": split_subjects(teacher.subjects),
        "education": teacher.education,
        "experience_years": teacher.experience_years,
        "hourly_rate": float(teacher.hourly_rate or 0),
        "timezone": teacher.timezone,
        "is_active": teacher.is_active,
    }


async def find_teacher_by_user(db: AsyncSession, user_id: int) -> Optional[Teacher]:
    result = await db.execute(
        select(Teacher).where(Teacher.user_id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_teacher_by_user(db: AsyncSession, user_id: int) -> Teacher:
    """Perfil de docente del usuario autenticado; 404 si todavía no lo ha creado."""
    teacher = await find_teacher_by_user(db, user_id)
    if not teacher:
        await teacher_profile_not_found_exception()
    return teacher


@handle_db_errors
async def create_teacher_profile(db: AsyncSession, user_id: int, data: TeacherProfileCreate) -> dict:
    if await find_teacher_by_user(db, user_id):
        raise HTTPException(status_code=400, detail="El perfil de docente ya existe")

    db.add(Teacher(
        user_id=user_id,
        bio=data.bio,
        subjects=",".join(data.subjects),
        education=data.education,
        experience_years=data.experience_years,
        hourly_rate=data.hourly_rate,
        timezone=data.timezone,
    ))
    await db.commit()
    logger.info(f"Perfil de docente creado para usuario {user_id}")

    teacher = await get_teacher_by_user(db, user_id)
    return teacher_to_dict(teacher)


@handle_db_errors
async def get_teacher_profile(db: AsyncSession, user_id: int) -> dict:
    teacher = await get_teacher_by_user(db, user_id)
    return teacher_to_dict(teacher)


@handle_db_errors
async def update_teacher_profile(db: AsyncSession, user_id: int, data: TeacherProfileUpdate) -> dict:
    teacher = await get_teacher_by_user(db, user_id)

    changes = data.model_dump(exclude_unset=True)
    if "subjects" in changes:
        changes["subjects"] = ",".join(changes["subjects"] or [])
    for field, value in changes.items():
        setattr(teacher, field, value)

    await db.commit()
    teacher = await get_teacher_by_user(db, user_id)
    return teacher_to_dict(teacher)


class PublicTeacherService:
    @staticmethod
    async def list_public_teachers(db: AsyncSession, subject: Optional[str] = None) -> List[dict]:
        """Docentes activos con calificación promedio y número de reseñas."""
        ratings = (
            select(
                Review.teacher_id,
                func.avg(Review.rating).label("average_rating"),
                func.count(Review.id).label("total_reviews"),
            )
            .group_by(Review.teacher_id)
            .subquery()
        )
        stmt = (
            select(Teacher, ratings.c.average_rating, ratings.c.total_reviews)
            .outerjoin(ratings, ratings.c.teacher_id == Teacher.id)
            .where(Teacher.is_active == True)  # noqa: E712
            .order_by(Teacher.id)
        )
        if subject:
            stmt = stmt.where(Teacher.subjects.ilike(f"%{subject}%"))

        result = await db.execute(stmt)
        teachers = []
        for teacher, average_rating, total_reviews in result.all():
            if not teacher.user.is_active:
                continue
            item = teacher_to_dict(teacher)
            item.pop("email")
            item["average_rating"] = round(float(average_rating or 0), 2)
            item["total_reviews"] = total_reviews or 0
            teachers.append(item)
        return teachers

    @staticmethod
    async def get_public_teacher(db: AsyncSession, teacher_id: int) -> dict:
        result = await db.execute(select(Teacher).where(Teacher.id == teacher_id))
        teacher = result.scalar_one_or_none()
        if not teacher or not teacher.is_active:
            raise HTTPException(status_code=404, detail="Docente no encontrado")

        rating_result = await db.execute(
            select(func.coalesce(func.avg(Review.rating), 0), func.count(Review.id))
            .where(Review.teacher_id == teacher_id)
        )
        average_rating, total_reviews = rating_result.one()

        windows_result = await db.execute(
            select(Availability)
            .where(Availability.teacher_id == teacher_id, Availability.is_available == True)  # noqa: E712
            .order_by(Availability.day_of_week, Availability.start_time)
        )

        data = teacher_to_dict(teacher)
        data.pop("email")
        data["average_rating"] = round(float(average_rating), 2)
        data["total_reviews"] = total_reviews
        data["availability"] = [window_to_dict(w) for w in windows_result.scalars().all()]
        return data
