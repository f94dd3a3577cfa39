"""
Servicio de correo electrónico para el formulario de contacto.

Funciones:
- resolve_recipient: Determina a quién se envía el aviso de contacto
- resolve_site_name: Nombre del sitio para el asunto del correo
- compose_contact_body: Cuerpo en texto plano del aviso
- dispatch_contact_email: Envía el aviso (una sola vez) si no hay errores
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from flask import current_app
from flask_mail import Message

from .messages import GENERIC_ERROR_KEY, SEND_FAILED_MESSAGE
from .options import ADMIN_EMAIL_OPTION, CONTACT_ADDRESS_OPTION, SITE_URL_OPTION, get_option
from .validate import is_valid_email

GENERIC_SITE_NAME = "Contact Form"
DEFAULT_RECIPIENT_NAME = "Admin"
SUBJECT_PREFIX = "Contact From "


class NotSentReason(Enum):
    VALIDATION = "validation"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class RecipientInfo:
    address: str
    name: str


@dataclass(frozen=True)
class DispatchResult:
    sent: bool
    reason: Optional[NotSentReason] = None


def resolve_recipient(get_config=get_option):
    """
    Determina el destinatario del aviso.

    Usa la opción contact_address ({address, name}). Si la dirección falta o
    no es válida, recurre a admin_email; si tampoco existe, queda vacía y el
    transporte reportará el fallo.

    Returns:
        RecipientInfo
    """
    options = get_config(CONTACT_ADDRESS_OPTION)
    if not isinstance(options, dict):
        options = {}

    address = options.get("address")
    address = address.strip() if isinstance(address, str) else ""
    name = options.get("name")
    name = name.strip() if isinstance(name, str) and name.strip() else DEFAULT_RECIPIENT_NAME

    if address and is_valid_email(address):
        return RecipientInfo(address=address, name=name)

    admin_email = get_config(ADMIN_EMAIL_OPTION)
    admin_email = admin_email.strip() if isinstance(admin_email, str) else ""
    return RecipientInfo(address=admin_email, name=name)


def resolve_site_name(get_config=get_option):
    """Host de la URL del sitio, o 'Contact Form' si no hay URL configurada."""
    site_url = get_config(SITE_URL_OPTION)
    if not isinstance(site_url, str) or not site_url.strip():
        return GENERIC_SITE_NAME
    return urlparse(site_url.strip()).hostname or GENERIC_SITE_NAME


def compose_contact_body(data):
    return (
        f"Name: {data['name']}\n"
        f"Email: {data['email']}\n"
        f"Company: {data['company']}\n"
        "\n"
        "Message:\n"
        "\n"
        f"{data['message']}"
    )


def header_display_name(value):
    """Nombre apto para una cabecera: sin saltos de línea ni espacios repetidos."""
    return " ".join(str(value or "").split())


def build_contact_message(data, recipient, site_name):
    return Message(
        subject=SUBJECT_PREFIX + site_name,
        sender=(header_display_name(data["name"]), data["email"]),
        reply_to=data["email"],
        recipients=[(header_display_name(recipient.name), recipient.address)],
        body=compose_contact_body(data),
    )


def dispatch_contact_email(data, messages, mail, get_config=get_option):
    """
    Envía el aviso de contacto al destinatario configurado.

    Args:
        data: Campos saneados del formulario
        messages: Mensajes de error; si no está vacío no se envía nada. En
            caso de fallo del transporte se agrega la clave 'generic'.
        mail: Instancia de flask_mail.Mail (o cualquier objeto con send())
        get_config: Lectura de opciones del sitio

    Returns:
        DispatchResult
    """
    if messages:
        return DispatchResult(sent=False, reason=NotSentReason.VALIDATION)

    recipient = resolve_recipient(get_config)
    site_name = resolve_site_name(get_config)

    try:
        mail.send(build_contact_message(data, recipient, site_name))
    except Exception as exc:
        current_app.logger.error(
            'No se pudo enviar el aviso de contacto: %s',
            str(exc) or type(exc).__name__,
            extra={
                'event': 'contact.send_failed',
                'error': str(exc) or type(exc).__name__,
                'recipient': recipient.address,
            },
        )
        messages[GENERIC_ERROR_KEY] = SEND_FAILED_MESSAGE
        return DispatchResult(sent=False, reason=NotSentReason.TRANSPORT_ERROR)

    current_app.logger.info(
        'Aviso de contacto enviado',
        extra={'event': 'contact.sent', 'recipient': recipient.address, 'site': site_name},
    )
    return DispatchResult(sent=True)
