"""
Configuración de base de datos.

Las tablas sincronizables no tienen modelos ORM: su forma se descubre
en tiempo de ejecucion con el catalogo de esquemas.
"""
from app.infrastructure.database.session import AsyncSessionLocal, engine, get_db

__all__ = ["AsyncSessionLocal", "engine", "get_db"]
