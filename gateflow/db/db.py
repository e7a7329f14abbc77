from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()


def init_db(app):
    """Bind the shared SQLAlchemy handle and Alembic migrations to the app.

    Connection settings come from ``app.config`` (see ``gateflow.config``);
    run ``flask db migrate`` / ``flask db upgrade`` to evolve the schema.
    """
    db.init_app(app)
    migrate.init_app(app, db)
