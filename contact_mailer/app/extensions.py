from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_mail import Mail
from flask_cors import CORS


db = SQLAlchemy(session_options={"expire_on_commit": False})
migrate = Migrate()
mail = Mail()
cors = CORS()
