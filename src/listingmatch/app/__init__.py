from __future__ import annotations

from flask import Flask

from listingmatch.config.settings import Settings, get_settings
from listingmatch.comparables.config import scoring_config_from_settings
from .routes import bp as main_bp, register_error_handlers
from listingmatch.logging_config import configure_logging


def create_app(settings: Settings | None = None) -> Flask:
    settings = settings or get_settings()
    configure_logging()

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.SECRET_KEY
    app.config["EXPORT_DIR"] = str(settings.EXPORT_DIR)
    app.config["MAX_COMPARABLES"] = settings.MAX_COMPARABLES
    # Scoring tables are resolved once per app; requests may layer overrides on top
    app.config["SCORING_CONFIG"] = scoring_config_from_settings(settings)

    app.register_blueprint(main_bp)
    register_error_handlers(app)
    return app
