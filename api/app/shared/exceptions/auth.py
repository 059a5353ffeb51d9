"""
Excepciones relacionadas con autenticación y autorización.
"""
from app.shared.exceptions.base import AppException


class ForbiddenException(AppException):
    """Excepción para acceso prohibido."""

    def __init__(self, message: str = "Acceso prohibido", error_code: str = "FORBIDDEN"):
        super().__init__(
            message=message,
            status_code=403,
            error_code=error_code
        )


class InvalidApiKeyException(ForbiddenException):
    """Excepción cuando la API key falta, no coincide o no está configurada."""

    def __init__(self):
        super().__init__(
            message="Invalid or missing API key",
            error_code="INVALID_API_KEY"
        )
