"""Mensajes de error legibles para el formulario de contacto."""
from .validate import ErrorCode

GENERIC_ERROR_KEY = "generic"
SEND_FAILED_MESSAGE = "There was a problem sending your email. Please try again later."
INVALID_REQUEST_MESSAGE = "The form data could not be read. Please try again."


def _capitalize_first(text):
    return text[:1].upper() + text[1:]


def build_error_message(field, code):
    if code is ErrorCode.BLANK:
        return _capitalize_first(f"{field} cannot be blank")
    if code is ErrorCode.INVALID:
        return f"Please make sure the {field} field is in valid format"
    return f"The {field} input is incorrect."


def build_error_messages(errors):
    """
    Convierte el mapa de errores en mensajes para quien envía el formulario.

    Función pura: mismo mapa, mismos mensajes. Nunca lanza excepciones;
    un código desconocido produce el mensaje genérico del campo.
    """
    return {field: build_error_message(field, code) for field, code in (errors or {}).items()}
