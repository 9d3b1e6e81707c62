import bleach


class HTMLSanitizer:
    """Sanitizador de HTML para prevenir ataques XSS."""

    # Tags permitidos en la biografía del docente
    ALLOWED_TAGS = ['p', 'br', 'strong', 'em', 'u', 'a', 'ul', 'ol', 'li']

    ALLOWED_ATTRIBUTES = {
        'a': ['href', 'title'],
    }

    ALLOWED_PROTOCOLS = ['http', 'https', 'mailto']

    @staticmethod
    def sanitize(text: str) -> str:
        """Conserva el formato básico de ALLOWED_TAGS y elimina el resto del HTML."""
        if not text:
            return ""

        return bleach.clean(
            text,
            tags=HTMLSanitizer.ALLOWED_TAGS,
            attributes=HTMLSanitizer.ALLOWED_ATTRIBUTES,
            protocols=HTMLSanitizer.ALLOWED_PROTOCOLS,
            strip=True
        )

    @staticmethod
    def sanitize_strict(text: str) -> str:
        """
        Elimina TODOS los tags HTML.
        Se usa en nombres, mensajes, notas de reserva y datos de pago.
        """
        if not text:
            return ""

        return bleach.clean(text, tags=[], strip=True)
