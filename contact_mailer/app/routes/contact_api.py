"""Contact API - envío del formulario desde JavaScript."""
from flask import jsonify, request

from . import api
from ..extensions import mail
from ..services.contact import process_contact_submission
from ..services.messages import GENERIC_ERROR_KEY, INVALID_REQUEST_MESSAGE
from ..services.reporter import TransportMode


@api.post("/contact")
def contact_json():
    """API endpoint para formulario de contacto (JSON o form-urlencoded)."""
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({GENERIC_ERROR_KEY: INVALID_REQUEST_MESSAGE}), 400
    else:
        data = request.form

    _, outcome = process_contact_submission(data, TransportMode.INTERACTIVE, mail)
    return jsonify(outcome.payload), outcome.status_code
