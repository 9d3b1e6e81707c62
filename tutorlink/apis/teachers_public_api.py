from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.apis.deps import get_db, public_access
from tutorlink.services.teachers.teacher_profile_service import PublicTeacherService

router = APIRouter()


@router.get("/", dependencies=[Depends(public_access)])
async def list_teachers(
    subject: Optional[str] = Query(None, description="Filtra por materia"),
    db: AsyncSession = Depends(get_db)
):
    """Catálogo público de docentes activos con su calificación promedio."""
    teachers = await PublicTeacherService.list_public_teachers(db, subject)
    return {"success": True, "message": "Docentes obtenidos exitosamente", "data": teachers}


@router.get("/{teacher_id}", dependencies=[Depends(public_access)])
async def get_teacher(teacher_id: int, db: AsyncSession = Depends(get_db)):
    teacher = await PublicTeacherService.get_public_teacher(db, teacher_id)
    return {"success": True, "message": "Docente obtenido exitosamente", "data": teacher}
