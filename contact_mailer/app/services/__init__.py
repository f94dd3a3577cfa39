"""
Services package - lógica del formulario de contacto.

Este paquete contiene las etapas del flujo de contacto, independientes de los
blueprints, organizadas por responsabilidad.
"""

__all__ = [
    "contact",
    "mail",
    "messages",
    "options",
    "reporter",
    "request_utils",
    "transient_state",
    "validate",
]
