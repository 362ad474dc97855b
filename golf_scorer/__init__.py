import os
import logging
import sqlite3

from flask import Flask, jsonify
from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.engine import Engine

from .extensions import db, migrate

load_dotenv()  # This will load variables from .env into the environment


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_app(test_config=None):
    app = Flask(__name__)

    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL', 'sqlite:///golf_scorer.sqlite3')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SECRET_KEY'] = os.getenv('FLASK_SECRET_KEY', 'default-secret')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if test_config:
        app.config.update(test_config)

    logging.basicConfig(level=app.config['LOG_LEVEL'])
    app.logger.setLevel(app.config['LOG_LEVEL'])

    db.init_app(app)
    migrate.init_app(app, db)

    # Registers the single-active-tournament listener on every session
    from golf_scorer.utils import active_tournament  # noqa: F401
    from golf_scorer.utils.settings_store import seed_default_settings

    from golf_scorer.blueprints.main.main import main_bp
    from golf_scorer.blueprints.players.players import players_bp
    from golf_scorer.blueprints.tournaments.tournaments import tournaments_bp
    from golf_scorer.blueprints.groups.groups import groups_bp
    from golf_scorer.blueprints.scores.scores import scores_bp
    from golf_scorer.blueprints.settings.settings import settings_bp

    app.register_blueprint(main_bp, url_prefix='/')
    app.register_blueprint(players_bp, url_prefix='/players')
    app.register_blueprint(tournaments_bp, url_prefix='/tournaments')
    app.register_blueprint(groups_bp, url_prefix='/groups')
    app.register_blueprint(scores_bp, url_prefix='/scores')
    app.register_blueprint(settings_bp, url_prefix='/settings')

    @app.errorhandler(404)
    def page_not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.error(f"Unhandled error: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()
        inserted = seed_default_settings()
        if inserted:
            app.logger.info(f"Seeded default settings: {', '.join(inserted)}")
        app.logger.info(f"Using database: {app.config['SQLALCHEMY_DATABASE_URI']}")

    return app
