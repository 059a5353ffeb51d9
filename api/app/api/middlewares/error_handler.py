"""
Middleware para manejo centralizado de errores.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware para capturar errores no manejados.
    Los AppException los resuelve el exception handler de la app; aqui
    solo llega lo inesperado, que se devuelve como un error 500 generico.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Procesa la petición y captura errores.

        Args:
            request: Petición HTTP
            call_next: Siguiente middleware/handler

        Returns:
            Response: Respuesta HTTP
        """
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            # Sin args posicionales loguru no formatea el mensaje (llaves seguras)
            logger.opt(exception=exc).error(
                f"Error no manejado en {request.method} {request.url.path}: {exc}"
            )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "Ha ocurrido un error interno del servidor",
                    "code": "INTERNAL_SERVER_ERROR",
                    "details": {}
                }
            )
