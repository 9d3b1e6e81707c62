"""
Validadores de entrada para prevenir XSS.
Se usan en los schemas de Pydantic para sanitizar automáticamente.
"""

from typing import Any

from tutorlink.cores.html_sanitizer import HTMLSanitizer


def sanitize_string_field(value: Any) -> Any:
    """
    Validador para campos de texto que elimina HTML peligroso.

    Uso en Pydantic:
        class MySchema(BaseModel):
            nombre: str

            _sanitize_nombre = field_validator('nombre')(sanitize_string_field)
    """
    if value is None:
        return None

    if not isinstance(value, str):
        value = str(value)

    return HTMLSanitizer.sanitize_strict(value).strip()


def sanitize_html_field(value: Any) -> Any:
    """
    Validador para campos que SÍ permiten HTML básico (biografía del docente).
    """
    if value is None:
        return None

    if not isinstance(value, str):
        value = str(value)

    return HTMLSanitizer.sanitize(value).strip()
