"""
Respuesta al envío del formulario de contacto.

- Modo interactivo (JS): devuelve 1 o el mapa de mensajes de error.
- Modo formulario clásico: guarda el estado en la sesión y pide una
  redirección a la página de origen.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from flask import current_app, has_app_context

from .messages import GENERIC_ERROR_KEY
from .transient_state import ERROR_NAMESPACE, SUCCESS_KEY, VALUE_NAMESPACE, fit_value

SUCCESS_PAYLOAD = 1


class TransportMode(Enum):
    INTERACTIVE = "interactive"
    FORM_POST = "form_post"


@dataclass(frozen=True)
class ReporterOutcome:
    payload: Any = None
    status_code: int = 200
    redirect_url: Optional[str] = None

    @property
    def is_redirect(self):
        return self.redirect_url is not None


def strip_query_string(url):
    return (url or "").split("?", 1)[0]


def _interactive_status(messages):
    if not messages:
        return 200
    if GENERIC_ERROR_KEY in messages:
        return 502
    return 400


def report(mode, messages, data, state=None, referrer=None, fallback_url="/contact"):
    """
    Decide la respuesta según el modo de transporte.

    Args:
        mode: TransportMode
        messages: Mensajes de error (vacío = éxito)
        data: Campos saneados enviados
        state: Almacén transitorio (SessionTransientState); solo FORM_POST
        referrer: Página desde la que se envió el formulario
        fallback_url: Destino si no hay referrer utilizable

    Returns:
        ReporterOutcome
    """
    if mode is TransportMode.INTERACTIVE:
        payload = dict(messages) if messages else SUCCESS_PAYLOAD
        return ReporterOutcome(payload=payload, status_code=_interactive_status(messages))

    if state is None:
        raise ValueError("El modo formulario necesita un almacén de estado transitorio.")

    state.clear()
    if not messages:
        state.put(SUCCESS_KEY, SUCCESS_PAYLOAD)
    else:
        for field, message in messages.items():
            state.put(ERROR_NAMESPACE + field, message)
        truncated = []
        for field, value in data.items():
            stored, was_cut = fit_value(field, value)
            if was_cut:
                truncated.append(field)
            state.put(VALUE_NAMESPACE + field, stored)
        if truncated and has_app_context():
            current_app.logger.warning(
                "Valores del formulario recortados al guardarlos en la sesión",
                extra={"event": "contact.state_truncated", "fields": truncated},
            )

    return ReporterOutcome(
        status_code=302,
        redirect_url=strip_query_string(referrer) or fallback_url,
    )
