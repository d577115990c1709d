import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from werkzeug.middleware.proxy_fix import ProxyFix

import config
from routes.ai_router import ai_bp
from routes.comment_router import comment_bp
from routes.emoji_router import emoji_bp
from routes.font_router import font_bp
from routes.static_router import static_bp
from routes.template_router import template_bp
from routes.upload_router import upload_bp
from services.image_encoder import NetworkClassifier
from services.template_service import DEFAULT_STYLE_KEYWORDS
from services.upload_service import FILE_TOO_LARGE
from utils import context
from utils.ark_client import create_client
from utils.errors import AppError
from utils.storage import create_store

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(e):
        if e.status_code >= 500:
            logger.error("%s: %s", type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        return jsonify({"error": "File exceeds the size limit", "code": FILE_TOO_LARGE}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception("unhandled server error")
        return jsonify({"error": "Internal server error"}), 500


def create_app(overrides=None, store=None, ai_client=None, classifier=None, keywords=None):
    app = Flask(__name__)
    app.config.update(config.as_dict())
    if overrides:
        app.config.update(overrides)
    # werkzeug rejects larger request bodies before they are parsed
    if app.config.get("MAX_CONTENT_LENGTH") is None:
        app.config["MAX_CONTENT_LENGTH"] = (
            app.config["MAX_IMAGE_MB"] * app.config["MAX_BATCH_FILES"] * 1024 * 1024
        )

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if app.config.get("TRUST_PROXY"):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    CORS(app, resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}})

    store = store or create_store(app.config)
    store.ensure_dirs(config.ASSET_DIRS)

    app.extensions[context.STORE] = store
    app.extensions[context.AI_CLIENT] = ai_client or create_client(app.config)
    app.extensions[context.CLASSIFIER] = classifier or NetworkClassifier()
    app.extensions[context.KEYWORDS] = keywords or DEFAULT_STYLE_KEYWORDS

    if not app.config.get("AI_API_KEY") and ai_client is None:
        logger.warning("AI_API_KEY is not set, AI endpoints will fail")

    app.register_blueprint(upload_bp)
    app.register_blueprint(template_bp)
    app.register_blueprint(emoji_bp)
    app.register_blueprint(font_bp)
    app.register_blueprint(comment_bp)
    app.register_blueprint(ai_bp)
    app.register_blueprint(static_bp)

    register_error_handlers(app)

    @app.route("/")
    def home():
        return "Flask running"

    return app


def main():
    app = create_app()
    logger.info("server listening on %s:%s", app.config["HOST"], app.config["PORT"])
    app.run(port=app.config["PORT"], host=app.config["HOST"])


if __name__ == "__main__":
    main()
