from .app import create_app
import json

import click

from .app.extensions import db
from .app.services.options import list_options, set_option

app = create_app()


@app.cli.command("init-db")
def init_db():
    """
    Crea las tablas si no existen (útil en desarrollo con SQLite).
    En producción usa `flask db upgrade`.
    """
    db.create_all()
    click.echo("Tablas creadas.")


@app.cli.command("set-option")
@click.argument("key")
@click.argument("value")
@click.option("--json", "as_json", is_flag=True, help="Interpreta VALUE como JSON.")
def set_option_command(key, value, as_json=False):
    """Guarda una opción del sitio (contact_address, admin_email, site_url...)."""
    if as_json:
        try:
            value = json.loads(value)
        except ValueError as exc:
            raise click.BadParameter(f"JSON inválido: {exc}", param_hint="VALUE")
    row = set_option(key, value)
    click.echo(f"Opción '{row.key}' guardada.")


@app.cli.command("show-options")
def show_options():
    """Lista las opciones del sitio guardadas en la base de datos."""
    rows = list_options()
    if not rows:
        click.echo("No hay opciones guardadas.")
        return
    for row in rows:
        click.echo(f"{row.key} = {json.dumps(row.value, ensure_ascii=False)}")


@app.shell_context_processor
def make_shell_context():
    from .app.models import SiteOptions

    return {"app": app, "db": db, "SiteOptions": SiteOptions}


if __name__ == "__main__":
    app.run(debug=True)
