"""Health check del servicio."""

import time
from datetime import datetime, timezone
from flask import jsonify, current_app

from . import api
from ..extensions import db
from ..services.mail import resolve_recipient


@api.get("/health")
def health_check():
    """Verifica estado del sistema: base de datos de opciones y correo."""
    db_latency_ms = None
    db_status = "connected"
    start = time.perf_counter()
    try:
        db.session.execute(db.select(1))
        db_latency_ms = (time.perf_counter() - start) * 1000
    except Exception as exc:
        current_app.logger.error("Error de conexión a DB: %s", exc, extra={"event": "health.db_error"})
        db.session.rollback()
        db_status = "error"

    def classify_mail():
        if current_app.config.get("MAIL_SUPPRESS_SEND") or current_app.config.get("TESTING"):
            return "suppressed"
        if not current_app.config.get("MAIL_SERVER"):
            return "unconfigured"
        return "ok"

    recipient_configured = bool(resolve_recipient().address) if db_status == "connected" else None

    indicators = {
        "database": "ok" if db_status == "connected" else "critical",
        "mail": classify_mail(),
        "recipient": {True: "ok", False: "missing", None: "unknown"}[recipient_configured],
    }

    if db_status != "connected":
        overall = "error"
    elif indicators["mail"] == "unconfigured" or indicators["recipient"] == "missing":
        overall = "degraded"
    else:
        overall = "ok"

    payload = {
        "status": overall,
        "db_status": db_status,
        "metrics": {
            "db_latency_ms": round(db_latency_ms, 2) if db_latency_ms is not None else None,
        },
        "indicators": indicators,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    status_code = 200 if db_status == "connected" else 500
    return jsonify(payload), status_code
