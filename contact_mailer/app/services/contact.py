"""
Flujo completo de un envío del formulario de contacto.

validación -> mensajes de error -> envío del correo -> respuesta
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

from flask import current_app

from .mail import DispatchResult, dispatch_contact_email
from .messages import build_error_messages
from .options import get_option
from .reporter import TransportMode, report
from .validate import ValidationResult, validate_contact_submission


@dataclass
class ContactSubmission:
    """Contexto de una sola petición; se descarta al terminarla."""

    mode: TransportMode
    validation: ValidationResult
    messages: Dict[str, str] = field(default_factory=dict)
    dispatch: Optional[DispatchResult] = None


def detect_transport_mode(form, ajax_field="is_ajax"):
    return TransportMode.INTERACTIVE if ajax_field in form else TransportMode.FORM_POST


def process_contact_submission(
    form,
    mode,
    mail,
    state=None,
    referrer=None,
    fallback_url="/contact",
    get_config=get_option,
):
    """
    Procesa un envío y devuelve qué responder.

    Args:
        form: Campos crudos recibidos
        mode: TransportMode de la petición
        mail: Transporte de correo (flask_mail.Mail)
        state: Almacén transitorio para el modo formulario
        referrer: Página de origen para la redirección
        fallback_url: Redirección si no hay referrer
        get_config: Lectura de opciones del sitio

    Returns:
        Tupla (ContactSubmission, ReporterOutcome)
    """
    validation = validate_contact_submission(
        form,
        honeypot_field=current_app.config.get("CONTACT_HONEYPOT_FIELD", "covfefe"),
    )
    submission = ContactSubmission(
        mode=mode,
        validation=validation,
        messages=build_error_messages(validation.errors),
    )

    if validation.is_automated:
        # Respuesta neutra: el bot ve un éxito y no se envía nada.
        current_app.logger.warning(
            'Envío de contacto descartado por el campo trampa',
            extra={'event': 'contact.honeypot', 'mode': mode.value},
        )
        outcome = report(mode, {}, validation.data, state, referrer, fallback_url)
        return submission, outcome

    if submission.messages:
        current_app.logger.info(
            'Formulario de contacto con errores',
            extra={'event': 'contact.validation_failed', 'fields': sorted(submission.messages)},
        )

    submission.dispatch = dispatch_contact_email(
        validation.data,
        submission.messages,
        mail,
        get_config=get_config,
    )

    outcome = report(mode, submission.messages, validation.data, state, referrer, fallback_url)
    return submission, outcome
