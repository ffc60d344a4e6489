# Overview: Shared Flask extension handles, bound to the app in create_app().

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# Per-app-context scoped session; released by Flask-SQLAlchemy at teardown
db = SQLAlchemy()
migrate = Migrate(compare_type=True)
