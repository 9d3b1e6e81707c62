from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.apis.deps import get_db, public_access, student_required, teacher_required
from tutorlink.schemas.availability.availability_schema import (
    AvailabilityCheckRequest, AvailabilitySaveRequest, TeacherAgendaResponse
)
from tutorlink.services.availability.availability_service import (
    check_time_slot, delete_availability, get_availability_grid, get_public_weekly_agenda,
    list_public_availability, replace_availability,
)

router = APIRouter()


@router.get("/")
async def get_my_availability(db: AsyncSession = Depends(get_db), user_data: dict = Depends(teacher_required)):
    """Grilla semanal (lunes a domingo, 08:00 a 22:00) del docente autenticado."""
    grid = await get_availability_grid(db, user_data["user_id"])
    return {"success": True, "message": "Disponibilidad obtenida exitosamente", "data": grid}


async def _save(data: AvailabilitySaveRequest, db: AsyncSession, user_data: dict):
    windows = await replace_availability(db, user_data["user_id"], data)
    return {"success": True, "message": "Disponibilidad guardada exitosamente", "data": windows}


@router.post("/")
async def save_availability(
    data: AvailabilitySaveRequest,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(teacher_required)
):
    """
    Reemplaza todas las ventanas del docente.
    day_of_week acepta 0..6 (0 = domingo) o el nombre del día en inglés.
    """
    return await _save(data, db, user_data)


@router.put("/")
async def update_availability(
    data: AvailabilitySaveRequest,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(teacher_required)
):
    return await _save(data, db, user_data)


@router.delete("/{availability_id}")
async def remove_availability(
    availability_id: int,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(teacher_required)
):
    await delete_availability(db, user_data["user_id"], availability_id)
    return {"success": True, "message": "Disponibilidad eliminada exitosamente", "data": None}


@router.get("/teacher/{teacher_id}", dependencies=[Depends(public_access)])
async def get_teacher_availability(teacher_id: int, db: AsyncSession = Depends(get_db)):
    windows = await list_public_availability(db, teacher_id)
    return {"success": True, "message": "Disponibilidad del docente obtenida exitosamente", "data": windows}


@router.get("/teacher/{teacher_id}/agenda", response_model=TeacherAgendaResponse, dependencies=[Depends(public_access)])
async def get_teacher_agenda(teacher_id: int, week: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    """
    Agenda pública de la semana (lunes a domingo) que contiene `week` (YYYY-MM-DD).
    Sin `week` se usa la semana actual.
    """
    agenda = await get_public_weekly_agenda(db, teacher_id, week)
    return {"success": True, "message": "Agenda pública del docente obtenida exitosamente", "data": agenda}


@router.post("/teacher/{teacher_id}/check")
async def check_teacher_availability(
    teacher_id: int,
    data: AvailabilityCheckRequest,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(student_required)
):
    result = await check_time_slot(db, teacher_id, data)
    return {"success": True, "message": "El horario está disponible", "data": result}
