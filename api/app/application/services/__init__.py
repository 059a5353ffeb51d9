"""
Servicios de aplicacion.

Contiene la logica de reconciliacion reutilizable que no pertenece
a un caso de uso especifico.
"""
from app.application.services.identity_resolver import IdentityResolver
from app.application.services.record_reconciler import RecordReconciler, values_equal

__all__ = [
    # Resolucion de identidad
    "IdentityResolver",
    # Decision por registro
    "RecordReconciler",
    "values_equal",
]
