from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.apis.deps import get_db, public_access, student_required, teacher_required
from tutorlink.schemas.bookings.review_schema import ReviewCreate, ReviewResponse, TeacherReviewsResponse
from tutorlink.services.reviews.review_service import create_review, get_my_reviews, get_public_reviews

router = APIRouter()


@router.post("/booking/{booking_id}", response_model=ReviewResponse, status_code=201)
async def review_booking(
    booking_id: int,
    data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(student_required)
):
    review = await create_review(db, user_data["user_id"], booking_id, data)
    return {"success": True, "message": "Reseña registrada", "data": review}


@router.get("/teacher/", response_model=TeacherReviewsResponse)
async def my_reviews(db: AsyncSession = Depends(get_db), user_data: dict = Depends(teacher_required)):
    reviews = await get_my_reviews(db, user_data["user_id"])
    return {"success": True, "message": "Reseñas obtenidas exitosamente", "data": reviews}


@router.get("/public/{teacher_id}", response_model=TeacherReviewsResponse, dependencies=[Depends(public_access)])
async def public_reviews(teacher_id: int, db: AsyncSession = Depends(get_db)):
    reviews = await get_public_reviews(db, teacher_id)
    return {"success": True, "message": "Reseñas obtenidas exitosamente", "data": reviews}
