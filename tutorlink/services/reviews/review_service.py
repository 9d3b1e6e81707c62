import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.models import BookingStatus, Review, Teacher
from tutorlink.schemas.bookings.review_schema import ReviewCreate
from tutorlink.services.bookings.booking_service import get_booking
from tutorlink.services.teachers.teacher_profile_service import get_teacher_by_user
from tutorlink.services.users.student_profile_service import get_or_create_student
from tutorlink.services.validation.exception import handle_db_errors, forbidden_booking_exception

logger = logging.getLogger(__name__)


def review_to_dict(review: Review) -> dict:
    return {
        "id": review.id,
        "booking_id": review.booking_id,
        "teacher_id": review.teacher_id,
        "student_id": review.student_id,
        "student_name": review.student.user.full_name,
        "rating": review.rating,
        "comment": review.comment,
        "created_at": review.created_at,
    }


@handle_db_errors
async def create_review(db: AsyncSession, user_id: int, booking_id: int, data: ReviewCreate) -> dict:
    """Un estudiante califica una clase completada; solo una reseña por reserva."""
    student = await get_or_create_student(db, user_id)
    booking = await get_booking(db, booking_id)
    if booking.student_id != student.id:
        await forbidden_booking_exception()

    if booking.status != BookingStatus.COMPLETED:
        raise HTTPException(status_code=400, detail="Solo se pueden calificar clases completadas")

    existing = await db.execute(select(Review).where(Review.booking_id == booking_id))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Esta reserva ya tiene una reseña")

    review = Review(
        booking_id=booking.id,
        student_id=student.id,
        teacher_id=booking.teacher_id,
        rating=data.rating,
        comment=data.comment,
    )
    db.add(review)
    await db.commit()
    logger.info(f"Reseña creada para la reserva {booking_id} ({data.rating} estrellas)")

    result = await db.execute(
        select(Review).where(Review.id == review.id).execution_options(populate_existing=True)
    )
    return review_to_dict(result.scalar_one())


async def _teacher_reviews(db: AsyncSession, teacher_id: int) -> dict:
    result = await db.execute(
        select(Review).where(Review.teacher_id == teacher_id).order_by(Review.created_at.desc())
    )
    reviews: List[Review] = list(result.scalars().all())
    average = sum(r.rating for r in reviews) / len(reviews) if reviews else 0.0
    return {
        "teacher_id": teacher_id,
        "average_rating": round(average, 2),
        "total_reviews": len(reviews),
        "reviews": [review_to_dict(r) for r in reviews],
    }


@handle_db_errors
async def get_my_reviews(db: AsyncSession, user_id: int) -> dict:
    teacher = await get_teacher_by_user(db, user_id)
    return await _teacher_reviews(db, teacher.id)


@handle_db_errors
async def get_public_reviews(db: AsyncSession, teacher_id: int) -> dict:
    teacher = await db.get(Teacher, teacher_id)
    if not teacher:
        raise HTTPException(status_code=404, detail="Docente no encontrado")
    return await _teacher_reviews(db, teacher_id)
