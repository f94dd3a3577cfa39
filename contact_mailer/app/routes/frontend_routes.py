"""Frontend routes - página y envío clásico del formulario de contacto."""
from flask import (
    current_app,
    jsonify,
    request,
    redirect,
    render_template,
    url_for,
)

# Importar el blueprint desde el paquete routes
from . import frontend
from ..extensions import mail
from ..services.contact import detect_transport_mode, process_contact_submission
from ..services.transient_state import SessionTransientState
from ..services.validate import CONTACT_FIELDS


@frontend.get("/")
def serve_frontend():
    """La página principal es el formulario de contacto."""
    return redirect(url_for('frontend.contact_page'))


@frontend.get("/contact")
def contact_page():
    """Muestra el formulario con el resultado del envío anterior (si lo hay)."""
    feedback = SessionTransientState().consume()
    values = {name: feedback["values"].get(name, "") for name in CONTACT_FIELDS}
    return render_template(
        "contact.html",
        success=feedback["success"],
        errors=feedback["errors"],
        values=values,
        honeypot_field=current_app.config["CONTACT_HONEYPOT_FIELD"],
    )


@frontend.post("/contact")
def contact_form_submit():
    """
    Procesa el formulario de contacto.

    Con JavaScript el formulario agrega el campo is_ajax y recibe JSON; sin
    JavaScript el resultado queda en la sesión y se redirige a la página de
    origen.
    """
    mode = detect_transport_mode(request.form, current_app.config["CONTACT_AJAX_FIELD"])
    _, outcome = process_contact_submission(
        request.form,
        mode,
        mail,
        state=SessionTransientState(),
        referrer=request.referrer,
        fallback_url=url_for('frontend.contact_page'),
    )

    if outcome.is_redirect:
        return redirect(outcome.redirect_url)
    return jsonify(outcome.payload), outcome.status_code
