"""Initialize the Flask app and Firebase."""

import json
import logging
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask


CREDENTIALS_FILE = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
)


def _load_credentials(app):
    """Return ``(credential, project_id)`` for the service account in use.

    ``FIREBASE_CREDENTIALS_JSON`` wins over ``firebase_credentials.json`` at
    the repository root. Without either, application default credentials and
    ``FIREBASE_PROJECT_ID`` are used.
    """
    raw = app.config.get("FIREBASE_CREDENTIALS_JSON")
    if raw:
        try:
            info = json.loads(raw)
            return credentials.Certificate(info), info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Ignoring invalid FIREBASE_CREDENTIALS_JSON: {e}")

    if os.path.exists(CREDENTIALS_FILE):
        try:
            with open(CREDENTIALS_FILE) as f:
                info = json.load(f)
            return credentials.Certificate(CREDENTIALS_FILE), info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Ignoring unreadable {CREDENTIALS_FILE}: {e}")

    return credentials.ApplicationDefault(), app.config.get("FIREBASE_PROJECT_ID")


def _init_firebase(app):
    if firebase_admin._apps:
        return
    cred, project_id = _load_credentials(app)
    app.logger.info(f"Connecting to Firestore project {project_id or '(default)'}")
    firebase_admin.initialize_app(cred, {"projectId": project_id} if project_id else None)


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__)

    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        FIREBASE_CREDENTIALS_JSON=os.environ.get("FIREBASE_CREDENTIALS_JSON"),
        FIREBASE_PROJECT_ID=os.environ.get("FIREBASE_PROJECT_ID"),
        MUSIC_PROVIDER=os.environ.get("MUSIC_PROVIDER") or "deezer",
        DEEZER_API_BASE_URL=os.environ.get("DEEZER_API_BASE_URL")
        or "https://api.deezer.com",
        MUSIC_SEARCH_TIMEOUT=float(os.environ.get("MUSIC_SEARCH_TIMEOUT") or 5.0),
        LOG_LEVEL=(os.environ.get("LOG_LEVEL") or "INFO").upper(),
    )

    if test_config:
        app.config.update(test_config)

    logging.getLogger("songclash").setLevel(app.config["LOG_LEVEL"])

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        _init_firebase(app)

    # Register blueprints
    from . import game as game_bp

    app.register_blueprint(game_bp.bp)

    from . import player as player_bp

    app.register_blueprint(player_bp.bp)

    from . import round as round_bp

    app.register_blueprint(round_bp.bp)

    from . import music as music_bp

    app.register_blueprint(music_bp.bp)

    from . import challenge as challenge_bp

    app.register_blueprint(challenge_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    return app
