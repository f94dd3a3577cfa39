"""
Opciones del sitio (lectura clave-valor).

Funciones:
- get_option: Busca una opción en la tabla site_options y, si no existe, en app.config
- set_option: Crea o actualiza una opción
- list_options: Devuelve todas las opciones guardadas
"""

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import SiteOptions

CONTACT_ADDRESS_OPTION = "contact_address"
ADMIN_EMAIL_OPTION = "admin_email"
SITE_URL_OPTION = "site_url"


def _config_fallback(key):
    config = current_app.config
    if key == CONTACT_ADDRESS_OPTION:
        address = config.get("CONTACT_ADDRESS")
        if not address:
            return None
        return {"address": address, "name": config.get("CONTACT_NAME") or "Admin"}
    if key == ADMIN_EMAIL_OPTION:
        return config.get("ADMIN_EMAIL")
    if key == SITE_URL_OPTION:
        return config.get("SITE_URL")
    return None


def get_option(key, default=None):
    """
    Obtiene el valor de una opción del sitio.

    Prioriza la fila en site_options; si no existe (o la tabla no está
    disponible) usa el valor equivalente de app.config.

    Args:
        key: Nombre de la opción
        default: Valor a retornar si no hay dato en ningún origen

    Returns:
        Valor almacenado (str, dict, ...) o default
    """
    normalized = (key or "").strip().lower()
    try:
        row = db.session.get(SiteOptions, normalized)
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.warning(
            'No se pudo leer la opción %s: %s',
            normalized,
            exc,
            extra={'event': 'options.read_failed', 'option': normalized},
        )
        row = None

    if row is not None and row.value is not None:
        return row.value

    fallback = _config_fallback(normalized)
    return default if fallback is None else fallback


def set_option(key, value):
    """Crea o actualiza una opción y la confirma en la base de datos."""
    normalized = (key or "").strip().lower()
    row = db.session.get(SiteOptions, normalized)
    if row is None:
        row = SiteOptions(key=normalized, value=value)
        db.session.add(row)
    else:
        row.value = value
    db.session.commit()
    return row


def list_options():
    return db.session.scalars(db.select(SiteOptions).order_by(SiteOptions.key)).all()
