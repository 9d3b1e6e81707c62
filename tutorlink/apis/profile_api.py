from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.apis.deps import get_db, student_required, teacher_required
from tutorlink.schemas.users.profile_schema import (
    StudentProfileResponse, StudentProfileUpdate,
    TeacherProfileCreate, TeacherProfileResponse, TeacherProfileUpdate,
)
from tutorlink.services.teachers.teacher_profile_service import (
    create_teacher_profile, get_teacher_profile, update_teacher_profile
)
from tutorlink.services.users.student_profile_service import get_student_profile, update_student_profile

router = APIRouter()


@router.get("/student/", response_model=StudentProfileResponse)
async def read_student_profile(db: AsyncSession = Depends(get_db), user_data: dict = Depends(student_required)):
    profile = await get_student_profile(db, user_data["user_id"])
    return {"success": True, "message": "Perfil obtenido", "data": profile}


@router.put("/student/", response_model=StudentProfileResponse)
async def edit_student_profile(
    data: StudentProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(student_required)
):
    profile = await update_student_profile(db, user_data["user_id"], data)
    return {"success": True, "message": "Perfil actualizado", "data": profile}


@router.post("/teacher/", response_model=TeacherProfileResponse, status_code=201)
async def create_teacher(
    data: TeacherProfileCreate,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(teacher_required)
):
    profile = await create_teacher_profile(db, user_data["user_id"], data)
    return {"success": True, "message": "Perfil de docente creado", "data": profile}


@router.get("/teacher/", response_model=TeacherProfileResponse)
async def read_teacher_profile(db: AsyncSession = Depends(get_db), user_data: dict = Depends(teacher_required)):
    profile = await get_teacher_profile(db, user_data["user_id"])
    return {"success": True, "message": "Perfil obtenido", "data": profile}


@router.put("/teacher/", response_model=TeacherProfileResponse)
async def edit_teacher_profile(
    data: TeacherProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(teacher_required)
):
    profile = await update_teacher_profile(db, user_data["user_id"], data)
    return {"success": True, "message": "Perfil actualizado", "data": profile}
