"""
Resolución de disponibilidad de un docente para un intervalo concreto.

Es la única implementación de la regla "¿el docente está libre en este horario?";
la creación de reservas y el endpoint de verificación la llaman siempre desde aquí.

- La ventana semanal ("HH:MM") se interpreta en la fecha del inicio propuesto,
  usando la hora local del servidor (no la zona horaria declarada por el docente).
- Contención con bordes inclusivos; traslape con intervalos semiabiertos
  (reservas consecutivas permitidas).
- Los resultados de dominio se devuelven como AvailabilityResult; solo los
  fallos de la base de datos se lanzan como AvailabilityStoreError.
"""

import enum
import logging
from datetime import date, datetime, time
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.models.booking.bookings import Booking, ACTIVE_BOOKING_STATUSES
from tutorlink.models.teachers.availability import Availability
from tutorlink.models.teachers.teacher import Teacher

logger = logging.getLogger(__name__)


class AvailabilityReason(str, enum.Enum):
    NOT_FOUND = "NOT_FOUND"
    NO_AVAILABILITY_THIS_DAY = "NO_AVAILABILITY_THIS_DAY"
    OUTSIDE_AVAILABILITY = "OUTSIDE_AVAILABILITY"
    SLOT_TAKEN = "SLOT_TAKEN"


REASON_MESSAGES = {
    AvailabilityReason.NOT_FOUND: "Docente no encontrado",
    AvailabilityReason.NO_AVAILABILITY_THIS_DAY: "El docente no tiene disponibilidad este día",
    AvailabilityReason.OUTSIDE_AVAILABILITY: "El horario está fuera de la disponibilidad del docente",
    AvailabilityReason.SLOT_TAKEN: "El horario ya está reservado",
}


class AvailabilityResult(BaseModel):
    available: bool
    reason: Optional[AvailabilityReason] = None

    @classmethod
    def ok(cls) -> "AvailabilityResult":
        return cls(available=True)

    @classmethod
    def rejected(cls, reason: AvailabilityReason) -> "AvailabilityResult":
        return cls(available=False, reason=reason)

    @property
    def message(self) -> str:
        if self.available:
            return "El horario está disponible"
        return REASON_MESSAGES[self.reason]


class AvailabilityStoreError(Exception):
    """La base de datos no respondió al consultar ventanas o reservas."""


# -----------------------------
# Conversión hora del día <-> instante
# -----------------------------
def parse_time_of_day(value: str) -> time:
    """Convierte "HH:MM" (o "HH:MM:SS") en time; ValueError si el formato no es válido."""
    if not isinstance(value, str):
        raise ValueError(f"Hora inválida: {value!r}")
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Hora inválida: {value!r}. Use HH:MM")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Hora fuera de rango: {value!r}")
    return time(hour=hour, minute=minute)


def format_time_of_day(value: time) -> str:
    return value.strftime("%H:%M")


def to_server_local(instant: datetime) -> datetime:
    """Instante en hora local del servidor sin tzinfo; los valores naive ya se consideran locales."""
    if instant.tzinfo is not None:
        return instant.astimezone().replace(tzinfo=None)
    return instant


def local_day_of_week(instant: datetime) -> int:
    """Día de la semana con domingo = 0 ... sábado = 6."""
    return to_server_local(instant).isoweekday() % 7


def window_bounds_on(window: Availability, day: date) -> Tuple[datetime, datetime]:
    """Ancla las horas "HH:MM" de la ventana en la fecha indicada."""
    start = datetime.combine(day, parse_time_of_day(window.start_time))
    end = datetime.combine(day, parse_time_of_day(window.end_time))
    return start, end


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """True si [a_start, a_end) y [b_start, b_end) comparten algún instante."""
    return a_start < b_end and a_end > b_start


def is_within_windows(windows: Iterable[Availability], proposed_start: datetime, proposed_end: datetime) -> bool:
    """Alguna ventana disponible contiene por sí sola el intervalo (las ventanas no se fusionan)."""
    start = to_server_local(proposed_start)
    end = to_server_local(proposed_end)
    for window in windows:
        if not window.is_available:
            continue
        window_start, window_end = window_bounds_on(window, start.date())
        if start >= window_start and end <= window_end:
            return True
    return False


def find_overlapping_booking(
    bookings: Iterable[Booking],
    proposed_start: datetime,
    proposed_end: datetime,
) -> Optional[Booking]:
    start = to_server_local(proposed_start)
    end = to_server_local(proposed_end)
    for booking in bookings:
        if intervals_overlap(start, end, to_server_local(booking.start_time), to_server_local(booking.end_time)):
            return booking
    return None


# -----------------------------
# Acceso a datos
# -----------------------------
class AvailabilityStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_teacher(self, teacher_id: int) -> Optional[Teacher]:
        try:
            result = await self.db.execute(select(Teacher).where(Teacher.id == teacher_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise AvailabilityStoreError(str(e)) from e

    async def list_windows(self, teacher_id: int, day_of_week: int) -> List[Availability]:
        try:
            result = await self.db.execute(
                select(Availability).where(
                    Availability.teacher_id == teacher_id,
                    Availability.day_of_week == day_of_week,
                ).order_by(Availability.start_time)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise AvailabilityStoreError(str(e)) from e


class BookingStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_active_bookings(self, teacher_id: int, statuses=ACTIVE_BOOKING_STATUSES) -> List[Booking]:
        try:
            result = await self.db.execute(
                select(Booking).where(
                    Booking.teacher_id == teacher_id,
                    Booking.status.in_(statuses),
                )
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise AvailabilityStoreError(str(e)) from e


class AvailabilityResolver:
    def __init__(self, availability_store, booking_store):
        self.availability_store = availability_store
        self.booking_store = booking_store

    async def check_availability(
        self,
        teacher_id: int,
        proposed_start: datetime,
        proposed_end: datetime,
    ) -> AvailabilityResult:
        teacher = await self.availability_store.get_teacher(teacher_id)
        if teacher is None:
            return AvailabilityResult.rejected(AvailabilityReason.NOT_FOUND)

        day_of_week = local_day_of_week(proposed_start)
        windows = await self.availability_store.list_windows(teacher_id, day_of_week)
        if not windows:
            return self._reject(teacher_id, AvailabilityReason.NO_AVAILABILITY_THIS_DAY)

        if not is_within_windows(windows, proposed_start, proposed_end):
            return self._reject(teacher_id, AvailabilityReason.OUTSIDE_AVAILABILITY)

        bookings = await self.booking_store.list_active_bookings(teacher_id, ACTIVE_BOOKING_STATUSES)
        if find_overlapping_booking(bookings, proposed_start, proposed_end) is not None:
            return self._reject(teacher_id, AvailabilityReason.SLOT_TAKEN)

        return AvailabilityResult.ok()

    @staticmethod
    def _reject(teacher_id: int, reason: AvailabilityReason) -> AvailabilityResult:
        logger.info(f"Horario rechazado para docente {teacher_id}: {reason.value}")
        return AvailabilityResult.rejected(reason)


async def check_availability(
    db: AsyncSession,
    teacher_id: int,
    proposed_start: datetime,
    proposed_end: datetime,
) -> AvailabilityResult:
    resolver = AvailabilityResolver(AvailabilityStore(db), BookingStore(db))
    return await resolver.check_availability(teacher_id, proposed_start, proposed_end)
