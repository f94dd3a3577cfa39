"""Utilidades de la petición HTTP."""
from flask import request as flask_request


def get_client_ip(req=None):
    """
    Obtiene la IP del cliente respetando X-Forwarded-For / X-Real-IP.

    Args:
        req: Objeto request de Flask. Por defecto el request global.
    """
    req = req or flask_request
    forwarded_for = req.headers.get("X-Forwarded-For", "")
    first_hop = next((part.strip() for part in forwarded_for.split(",") if part.strip()), None)
    if first_hop:
        return first_hop

    real_ip = (req.headers.get("X-Real-IP") or "").strip()
    return real_ip or req.remote_addr
