"""
Servicio de validación y saneamiento del formulario de contacto.

Cada verificador devuelve su propio par ``(valor, código_de_error)``; el
llamador arma el mapa de errores.
"""
import re
from dataclasses import dataclass
from enum import Enum
from html.parser import HTMLParser
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

REQUIRED_FIELDS = ("name", "email", "message")
CONTACT_FIELDS = ("name", "email", "company", "message")

DEFAULT_HONEYPOT_FIELD = "covfefe"

# Caracteres permitidos en una dirección tras el saneamiento.
_EMAIL_DISALLOWED_RE = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")

# Etiqueta sin cerrar al final del texto, p. ej. "Hola <b"
_UNCLOSED_TAG_RE = re.compile(r"<[A-Za-z/!?][^<>]*\Z")


class ErrorCode(Enum):
    BLANK = "blank"
    INVALID = "invalid"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ValidationResult:
    data: Mapping[str, str]
    errors: Mapping[str, ErrorCode]
    is_automated: bool = False

    @property
    def is_valid(self) -> bool:
        return not self.errors


class _TagStripper(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=False)
        self._chunks = []

    def handle_data(self, data):
        self._chunks.append(data)

    def handle_entityref(self, name):
        self._chunks.append(f"&{name};")

    def handle_charref(self, name):
        self._chunks.append(f"&#{name};")

    def get_data(self) -> str:
        return "".join(self._chunks)


def _strip_once(value: str) -> str:
    stripper = _TagStripper()
    stripper.feed(value)
    stripper.close()
    return stripper.get_data()


def strip_tags(value: str) -> str:
    """Elimina todo lo que parezca una etiqueta HTML, incluso anidada (``<<b>i>``)."""
    while "<" in value and ">" in value:
        stripped = _strip_once(value)
        if stripped == value:
            break
        value = stripped
    return _UNCLOSED_TAG_RE.sub("", value)


def sanitize_email(value: str) -> str:
    """Quita los caracteres que no pueden aparecer en una dirección de correo."""
    return _EMAIL_DISALLOWED_RE.sub("", value or "")


def is_valid_email(value: str) -> bool:
    """
    Sintaxis de la dirección. Acepta dominios de uso especial (.local) y
    literales IP (user@[192.168.0.1]); el dominio necesita al menos un punto.
    """
    if not value:
        return False
    try:
        info = validate_email(
            value,
            check_deliverability=False,
            globally_deliverable=False,
            allow_domain_literal=True,
        )
    except EmailNotValidError:
        return False
    return info.domain.startswith("[") or "." in info.domain


def clean_text(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    value = str(raw).strip()
    return strip_tags(value).strip()


def check_text(raw: Optional[str], required: bool = True) -> Tuple[str, Optional[ErrorCode]]:
    """
    Limpia un campo de texto.

    Args:
        raw: Valor recibido (None si el campo no vino en la petición)
        required: Si es True, un valor vacío tras la limpieza es BLANK

    Returns:
        Tupla (valor limpio, ErrorCode o None)
    """
    value = clean_text(raw)
    if required and value == "":
        return value, ErrorCode.BLANK
    return value, None


def check_email(raw: Optional[str]) -> Tuple[str, Optional[ErrorCode]]:
    """
    Limpia y valida el email. BLANK tiene prioridad sobre INVALID.

    Si el formato no es válido se conserva el valor saneado; nunca se usa
    para enviar porque el formulario ya tiene errores.
    """
    value, code = check_text(raw)
    if code is not None:
        return value, code

    email = sanitize_email(value)
    if not is_valid_email(email):
        return email, ErrorCode.INVALID
    return email, None


def is_honeypot_triggered(raw_fields: Mapping[str, Optional[str]], field_name: str = DEFAULT_HONEYPOT_FIELD) -> bool:
    value = raw_fields.get(field_name)
    if value is None:
        return False
    return str(value).strip() != ""


def validate_contact_submission(raw_fields, honeypot_field=DEFAULT_HONEYPOT_FIELD):
    """
    Valida los datos de un formulario de contacto.

    Args:
        raw_fields: Mapeo campo -> valor crudo (request.form, JSON, dict)
        honeypot_field: Nombre del campo trampa oculto

    Returns:
        ValidationResult con los datos saneados, el mapa de errores (vacío
        si todo es válido) y la marca de envío automatizado
    """
    raw_fields = raw_fields or {}
    checked = {}
    for field in CONTACT_FIELDS:
        raw = raw_fields.get(field)
        if field == "email":
            checked[field] = check_email(raw)
        else:
            checked[field] = check_text(raw, required=field in REQUIRED_FIELDS)

    data = {field: checked[field][0] for field in CONTACT_FIELDS}
    errors = {
        field: checked[field][1]
        for field in CONTACT_FIELDS
        if checked[field][1] is not None
    }

    return ValidationResult(
        data=MappingProxyType(data),
        errors=MappingProxyType(errors),
        is_automated=is_honeypot_triggered(raw_fields, honeypot_field),
    )
