"""
Servicio de autenticación por API key compartida (configurada por env).

IMPORTANTE:
- Si SYNC_API_KEY está vacía, ninguna petición se acepta.
- Solo valida la key; el tenant lo decide el cuerpo de la petición.
"""

from __future__ import annotations

import hmac
from typing import Optional


class ApiKeyAuthService:
    """
    Verifica una API key contra la key esperada.

    La comparación es en tiempo constante (hmac.compare_digest).
    """

    def __init__(self, expected_key: str) -> None:
        self._expected_key = expected_key or ""

    def is_configured(self) -> bool:
        return bool(self._expected_key)

    def verify(self, provided_key: Optional[str]) -> bool:
        if not self.is_configured() or not provided_key:
            return False

        return hmac.compare_digest(
            provided_key.encode("utf-8"), self._expected_key.encode("utf-8")
        )
