"""Flask application factory for the school audit backend."""
from flask import Flask
import os
import logging
from pathlib import Path
from .models import db
from .blueprints import audits
from .cli import init_db_command, import_csv_command
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = 'audits.db'

# Field clients embed base64 photos in the audit payload
MAX_CONTENT_LENGTH = 50 * 1024 * 1024


def create_app(test_config=None):
    """Flask application factory for the school audit backend.

    Creates and configures a Flask application instance with:
    - SQLAlchemy database integration
    - Blueprint registration for API endpoints
    - CLI command registration
    - Logging configuration

    Args:
        test_config (dict, optional): Configuration overrides for testing

    Returns:
        Flask: Configured Flask application instance
    """
    setup_logging()
    logger.info("Starting Flask application initialization")

    app = Flask(__name__, instance_relative_config=True)
    app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

    if test_config is None:
        # Load the instance config, if it exists, when not testing
        config_loaded = app.config.from_pyfile('config.py', silent=True)
        if config_loaded:
            logger.info("Loaded configuration from instance/config.py")
        else:
            logger.debug("No instance config file found, using defaults")
    else:
        app.config.from_mapping(test_config)
        logger.info("Loaded test configuration")

    try:
        Path(app.instance_path).mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.debug(f"Could not create instance directory: {app.instance_path}")

    # Only set default database URI if not already set (e.g., by tests)
    if 'SQLALCHEMY_DATABASE_URI' not in app.config:
        app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL', f'sqlite:///{DEFAULT_DB_NAME}')
        logger.info(f"Configured database URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
    else:
        logger.info(f"Using existing database URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    db.init_app(app)
    logger.info("SQLAlchemy database initialized")

    app.register_blueprint(audits.bp)
    logger.debug("Registered audits blueprint")

    app.cli.add_command(init_db_command)
    app.cli.add_command(import_csv_command)
    logger.info("CLI commands registered: init-db, import-csv")

    logger.info("Flask application initialization completed successfully")
    return app

