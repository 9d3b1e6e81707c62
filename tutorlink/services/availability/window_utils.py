from typing import Union

from fastapi import HTTPException

from tutorlink.models import Availability
from tutorlink.schemas.availability.availability_schema import DAY_NAMES

_DAY_INDEX = {name.lower(): index for index, name in enumerate(DAY_NAMES)}


def parse_day_of_week(value: Union[int, str]) -> int:
    """Acepta 0..6 (0 = domingo), "3" o el nombre en inglés ("Monday")."""
    if isinstance(value, bool):
        raise HTTPException(status_code=400, detail=f"Día de la semana inválido: {value}")
    if isinstance(value, int):
        day = value
    elif isinstance(value, str) and value.strip().isdigit():
        day = int(value.strip())
    elif isinstance(value, str) and value.strip().lower() in _DAY_INDEX:
        return _DAY_INDEX[value.strip().lower()]
    else:
        raise HTTPException(status_code=400, detail=f"Día de la semana inválido: {value}")

    if not 0 <= day <= 6:
        raise HTTPException(status_code=400, detail=f"Día de la semana fuera de rango: {value}")
    return day


def window_to_dict(window: Availability) -> dict:
    return {
        "id": window.id,
        "day_of_week": window.day_of_week,
        "day_name": DAY_NAMES[window.day_of_week],
        "start_time": window.start_time,
        "end_time": window.end_time,
        "is_available": window.is_available,
    }
