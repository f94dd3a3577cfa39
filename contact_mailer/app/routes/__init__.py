"""
Routes package - endpoints HTML y API del formulario de contacto.
"""
from flask import Blueprint

# Blueprint para la API (respuestas JSON)
api = Blueprint("api", __name__)

# Blueprint para frontend
frontend = Blueprint("frontend", __name__)

# Importar módulos de rutas después de crear blueprints para evitar circular imports
from . import (
    frontend_routes,
    contact_api,
    health,
)

__all__ = ["api", "frontend"]
