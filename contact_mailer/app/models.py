from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import JSON as SAJSON, TypeDecorator
from sqlalchemy.orm import validates
from .extensions import db


class JSONColumn(TypeDecorator):
    """JSON column that degrades gracefully on non-PostgreSQL engines."""

    impl = SAJSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(SAJSON())


class SiteOptions(db.Model):
    """Opciones del sitio (clave -> valor JSON) editables sin reiniciar la app."""

    __tablename__ = "site_options"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(JSONColumn, nullable=True)
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @validates("key")
    def _normalize_key(self, _, value):
        key = (value or "").strip().lower()
        if not key:
            raise ValueError("La clave de la opción no puede estar vacía.")
        return key

    def __repr__(self):
        return f"<SiteOptions {self.key}={self.value!r}>"
