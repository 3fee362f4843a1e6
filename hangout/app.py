"""
Flaskアプリの生成とBlueprintの登録。
Flask application factory and blueprint registration.
"""

import logging
import os
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from hangout import security
from hangout.routes.auth import auth_bp
from hangout.routes.generate import generate_bp
from hangout.routes.planner import planner_bp
from hangout.routes.saved import saved_bp

logger = logging.getLogger(__name__)


def create_app(config: Optional[dict] = None) -> Flask:
    """
    アプリケーションを生成する
    Build the Flask application.

    CORSは許可オリジンに限定し、全レスポンスにセキュリティヘッダーを付与します。
    CORS is limited to the allowed origins and every response gets security headers.
    """
    app = Flask(__name__)
    # セッション管理に必要な秘密鍵
    # Secret key used to sign the session cookie
    app.secret_key = os.getenv("SECRET_KEY", "dev-secret-key")
    app.config.update(
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE=os.getenv("COOKIE_SAMESITE", "Lax"),
    )
    if config:
        app.config.update(config)
    # Secure属性は COOKIE_SECURE または接続先から決める
    # Secure flag follows COOKIE_SECURE or the request's scheme and host
    app.session_interface = security.PlannerSessionInterface()

    CORS(
        app,
        resources={r"/api/*": {"origins": security.get_allowed_origins()}},
        supports_credentials=True,
    )

    # Blueprintの登録
    # Register blueprints
    app.register_blueprint(generate_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(saved_bp)
    app.register_blueprint(planner_bp)

    @app.route("/")
    def home():
        return jsonify({"service": "hangout-planner", "status": "ok"})

    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok"})

    app.after_request(security.apply_security_headers)
    return app
