"""
Utilidades de seguridad: verificación de la API key de sincronización.
"""
from typing import Optional
from fastapi import Depends, Header, Query
from loguru import logger

from app.core.config import settings
from app.infrastructure.security.api_key_auth_service import ApiKeyAuthService
from app.shared.exceptions.auth import InvalidApiKeyException


def get_api_key_auth_service() -> ApiKeyAuthService:
    """
    Dependencia para obtener el servicio de API key.

    Returns:
        ApiKeyAuthService: Servicio configurado con SYNC_API_KEY
    """
    return ApiKeyAuthService(settings.SYNC_API_KEY)


async def verify_api_key(
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
    api_key: Optional[str] = Query(None, description="Alternativa a la cabecera X-API-Key"),
    auth_service: ApiKeyAuthService = Depends(get_api_key_auth_service),
) -> None:
    """
    Exige una API key válida en la cabecera X-API-Key o en ?api_key=.

    Raises:
        InvalidApiKeyException: Si la key falta, no coincide o no está configurada
    """
    if not auth_service.is_configured():
        logger.warning("SYNC_API_KEY no configurada - se rechazan todas las peticiones de sync")
        raise InvalidApiKeyException()

    if not auth_service.verify(x_api_key or api_key):
        raise InvalidApiKeyException()
