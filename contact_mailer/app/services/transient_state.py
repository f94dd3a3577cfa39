"""Estado del formulario que sobrevive a la redirección (cookie de sesión firmada)."""
import json

from flask import session

STATE_PREFIX = "contact_"
SUCCESS_KEY = "success"
ERROR_NAMESPACE = "error_"
VALUE_NAMESPACE = "value_"

# Bytes de JSON (sin comprimir) que puede ocupar cada valor guardado. La suma
# con los mensajes de error y la firma queda por debajo de los ~4 KB que un
# navegador acepta por cookie.
VALUE_BYTE_LIMITS = {"message": 1600}
DEFAULT_VALUE_BYTE_LIMIT = 200


def _json_size(value):
    # La sesión de Flask serializa con ensure_ascii: los no ASCII ocupan \uXXXX
    return len(json.dumps(value))


def fit_value(field, value):
    """
    Recorta un valor del formulario para que quepa en la cookie de sesión.

    Returns:
        Tupla (valor, recortado)
    """
    limit = VALUE_BYTE_LIMITS.get(field, DEFAULT_VALUE_BYTE_LIMIT)
    value = "" if value is None else str(value)
    if _json_size(value) <= limit:
        return value, False

    low, high = 0, len(value)
    while low < high:
        middle = (low + high + 1) // 2
        if _json_size(value[:middle]) <= limit:
            low = middle
        else:
            high = middle - 1
    return value[:low], True


class SessionTransientState:
    """
    Guarda el resultado de un envío sin JavaScript para el siguiente render.

    Todas las claves llevan el prefijo ``contact_`` para no tocar el resto de
    la sesión.
    """

    def __init__(self, store=None, prefix=STATE_PREFIX):
        self._store = session if store is None else store
        self._prefix = prefix

    def put(self, key, value):
        self._store[self._prefix + key] = value

    def clear(self):
        for key in [k for k in self._store.keys() if k.startswith(self._prefix)]:
            self._store.pop(key, None)

    def consume(self):
        """
        Lee y borra el estado guardado.

        Returns:
            dict con 'success' (bool), 'errors' y 'values' (dicts por campo)
        """
        snapshot = {"success": False, "errors": {}, "values": {}}
        for key in [k for k in self._store.keys() if k.startswith(self._prefix)]:
            name = key[len(self._prefix):]
            value = self._store.pop(key, None)
            if name == SUCCESS_KEY:
                snapshot["success"] = bool(value)
            elif name.startswith(ERROR_NAMESPACE):
                snapshot["errors"][name[len(ERROR_NAMESPACE):]] = value
            elif name.startswith(VALUE_NAMESPACE):
                snapshot["values"][name[len(VALUE_NAMESPACE):]] = value
        return snapshot
