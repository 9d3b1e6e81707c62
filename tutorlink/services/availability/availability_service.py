"""
Gestión de la disponibilidad semanal del docente y vistas derivadas (grilla, agenda).
Toda decisión "¿está libre?" se delega a availability_resolver.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.models import Availability, Booking, Teacher, ACTIVE_BOOKING_STATUSES
from tutorlink.schemas.availability.availability_schema import (
    AvailabilitySaveRequest, AvailabilityCheckRequest, DAY_NAMES
)
from tutorlink.services.availability.window_utils import parse_day_of_week, window_to_dict
from tutorlink.services.bookings.availability_resolver import (
    AvailabilityReason, AvailabilityResult, AvailabilityStoreError,
    check_availability, format_time_of_day, intervals_overlap, parse_time_of_day, window_bounds_on,
)
from tutorlink.services.teachers.teacher_profile_service import get_teacher_by_user
from tutorlink.services.validation.exception import handle_db_errors

logger = logging.getLogger(__name__)

# Grilla del panel del docente: lunes..domingo, 08:00..22:00 en bloques de una hora
GRID_DAYS = [1, 2, 3, 4, 5, 6, 0]
GRID_FIRST_HOUR = 8
GRID_LAST_HOUR = 22

AGENDA_DAY_NAMES = ["Domingo", "Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado"]


async def resolve_or_raise(db: AsyncSession, teacher_id: int, start: datetime, end: datetime) -> AvailabilityResult:
    """
    Ejecuta el resolver y traduce el resultado a HTTP:
    NOT_FOUND -> 404, rechazos de horario -> 400, falla de la base -> 500.
    """
    try:
        result = await check_availability(db, teacher_id, start, end)
    except AvailabilityStoreError as e:
        logger.error(f"Error consultando disponibilidad del docente {teacher_id}: {e}")
        raise HTTPException(status_code=500, detail="No fue posible verificar la disponibilidad del docente")

    if result.available:
        return result
    if result.reason == AvailabilityReason.NOT_FOUND:
        raise HTTPException(status_code=404, detail=result.message)
    logger.warning(f"Horario no disponible para docente {teacher_id}: {result.reason.value}")
    raise HTTPException(status_code=400, detail=result.message)


async def _list_teacher_windows(db: AsyncSession, teacher_id: int, only_available: bool = False) -> List[Availability]:
    stmt = select(Availability).where(Availability.teacher_id == teacher_id)
    if only_available:
        stmt = stmt.where(Availability.is_available == True)  # noqa: E712
    stmt = stmt.order_by(Availability.day_of_week, Availability.start_time)
    result = await db.execute(stmt)
    return list(result.scalars().all())


@handle_db_errors
async def get_availability_grid(db: AsyncSession, user_id: int) -> List[Dict]:
    """Slots de una hora marcados como disponibles si caen dentro de una ventana activa."""
    teacher = await get_teacher_by_user(db, user_id)
    windows = await _list_teacher_windows(db, teacher.id)

    # Fecha de referencia arbitraria: solo importa la hora del día
    reference = date(2000, 1, 1)
    grid = []
    for day in GRID_DAYS:
        day_windows = [w for w in windows if w.day_of_week == day and w.is_available]
        bounds = [window_bounds_on(w, reference) for w in day_windows]
        for hour in range(GRID_FIRST_HOUR, GRID_LAST_HOUR):
            slot_start = datetime.combine(reference, datetime.min.time()).replace(hour=hour)
            slot_end = slot_start + timedelta(hours=1)
            grid.append({
                "id": f"{DAY_NAMES[day]}-{slot_start.strftime('%H:%M')}",
                "day_of_week": DAY_NAMES[day],
                "start_time": slot_start.strftime("%H:%M"),
                "end_time": slot_end.strftime("%H:%M"),
                "is_available": any(slot_start >= s and slot_end <= e for s, e in bounds),
            })
    return grid


@handle_db_errors
async def replace_availability(db: AsyncSession, user_id: int, request: AvailabilitySaveRequest) -> List[Dict]:
    """
    Reemplaza todas las ventanas del docente por las enviadas.
    Se valida todo antes de borrar; si una ventana es inválida no se escribe nada.
    """
    teacher = await get_teacher_by_user(db, user_id)

    new_windows = []
    for item in request.availabilities:
        day = parse_day_of_week(item.day_of_week)
        try:
            start = parse_time_of_day(item.start_time)
            end = parse_time_of_day(item.end_time)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if end <= start:
            raise HTTPException(
                status_code=400,
                detail=f"La hora de fin debe ser posterior a la de inicio ({item.start_time} - {item.end_time})"
            )
        new_windows.append(Availability(
            teacher_id=teacher.id,
            day_of_week=day,
            start_time=format_time_of_day(start),
            end_time=format_time_of_day(end),
            is_available=item.is_available,
        ))

    await db.execute(delete(Availability).where(Availability.teacher_id == teacher.id))
    db.add_all(new_windows)
    await db.commit()
    logger.info(f"Disponibilidad del docente {teacher.id} reemplazada ({len(new_windows)} ventanas)")

    windows = await _list_teacher_windows(db, teacher.id)
    return [window_to_dict(w) for w in windows]


@handle_db_errors
async def delete_availability(db: AsyncSession, user_id: int, availability_id: int) -> None:
    teacher = await get_teacher_by_user(db, user_id)

    result = await db.execute(
        select(Availability).where(
            Availability.id == availability_id,
            Availability.teacher_id == teacher.id,
        )
    )
    window = result.scalar_one_or_none()
    if not window:
        raise HTTPException(status_code=404, detail="Disponibilidad no encontrada")

    await db.delete(window)
    await db.commit()
    logger.info(f"Ventana {availability_id} eliminada del docente {teacher.id}")


async def _get_active_teacher(db: AsyncSession, teacher_id: int) -> Teacher:
    result = await db.execute(select(Teacher).where(Teacher.id == teacher_id))
    teacher = result.scalar_one_or_none()
    if not teacher:
        raise HTTPException(status_code=404, detail="Docente no encontrado")
    return teacher


@handle_db_errors
async def list_public_availability(db: AsyncSession, teacher_id: int) -> List[Dict]:
    await _get_active_teacher(db, teacher_id)
    windows = await _list_teacher_windows(db, teacher_id, only_available=True)
    return [window_to_dict(w) for w in windows]


def _week_start(week: Optional[str]) -> date:
    if not week:
        today = datetime.now().date()
    else:
        try:
            today = datetime.strptime(week, "%Y-%m-%d").date()
        except ValueError:
            raise HTTPException(status_code=400, detail="Formato de fecha inválido. Use YYYY-MM-DD")
    return today - timedelta(days=today.weekday())


def build_day_slots(day: date, windows: List[Availability], bookings: List[Booking]) -> List[Dict]:
    """Slots de una hora dentro de cada ventana; ocupado si se traslapa con una reserva activa."""
    slots = []
    for window in windows:
        if not window.is_available:
            continue
        window_start, window_end = window_bounds_on(window, day)
        cur = window_start
        while cur < window_end:
            nxt = min(cur + timedelta(hours=1), window_end)
            occupied = any(intervals_overlap(cur, nxt, b.start_time, b.end_time) for b in bookings)
            slots.append({
                "start_time": cur.strftime("%H:%M"),
                "end_time": nxt.strftime("%H:%M"),
                "status": "occupied" if occupied else "available",
                "availability_id": window.id,
            })
            cur = nxt
    return sorted(slots, key=lambda s: s["start_time"])


@handle_db_errors
async def get_public_weekly_agenda(db: AsyncSession, teacher_id: int, week: Optional[str] = None) -> Dict:
    teacher = await _get_active_teacher(db, teacher_id)
    week_start = _week_start(week)
    week_end = week_start + timedelta(days=6)

    windows = await _list_teacher_windows(db, teacher_id)

    range_start = datetime.combine(week_start, datetime.min.time())
    range_end = range_start + timedelta(days=7)
    booking_result = await db.execute(
        select(Booking).where(
            Booking.teacher_id == teacher_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.start_time < range_end,
            Booking.end_time > range_start,
        ).order_by(Booking.start_time)
    )
    bookings = list(booking_result.scalars().all())

    days = []
    for offset in range(7):
        day = week_start + timedelta(days=offset)
        day_of_week = day.isoweekday() % 7
        day_windows = [w for w in windows if w.day_of_week == day_of_week]
        day_slots = build_day_slots(day, day_windows, bookings)
        days.append({
            "date": day.strftime("%Y-%m-%d"),
            "day_name": AGENDA_DAY_NAMES[day_of_week],
            "slots": day_slots,
            "total_slots": len(day_slots),
            "available_slots": len([s for s in day_slots if s["status"] == "available"]),
            "occupied_slots": len([s for s in day_slots if s["status"] == "occupied"]),
        })

    return {
        "teacher_id": teacher.id,
        "teacher_name": teacher.user.full_name,
        "week_start": week_start.strftime("%Y-%m-%d"),
        "week_end": week_end.strftime("%Y-%m-%d"),
        "days": days,
    }


def parse_time_slot(request: AvailabilityCheckRequest):
    """Convierte {date: "YYYY-MM-DD", time_slot: "HH:MM - HH:MM"} en el intervalo propuesto."""
    try:
        day = datetime.strptime(request.date.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail="Formato de fecha inválido. Use YYYY-MM-DD")

    parts = request.time_slot.split("-")
    if len(parts) != 2:
        raise HTTPException(status_code=400, detail="Formato de horario inválido. Use HH:MM - HH:MM")
    try:
        start = datetime.combine(day, parse_time_of_day(parts[0]))
        end = datetime.combine(day, parse_time_of_day(parts[1]))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if start >= end:
        raise HTTPException(status_code=400, detail="La hora de inicio debe ser anterior a la hora de fin")
    return start, end


async def check_time_slot(db: AsyncSession, teacher_id: int, request: AvailabilityCheckRequest) -> Dict:
    start, end = parse_time_slot(request)
    result = await resolve_or_raise(db, teacher_id, start, end)
    return {
        "available": result.available,
        "start_time": start.isoformat(),
        "end_time": end.isoformat(),
    }
