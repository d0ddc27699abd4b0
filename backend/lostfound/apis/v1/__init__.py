from flask import Blueprint, Flask, g, request

from ...modules.analytics.routes import bp as analytics_bp
from ...modules.auth import bp as auth_bp
from ...modules.claims.routes import bp as claims_bp
from ...modules.items.routes import bp as items_bp
from ...modules.notifications.routes import bp as notifications_bp
from ...modules.reports.routes import bp as reports_bp
from ...security import resolve_caller


def register_api(app: Flask) -> None:
    api_v1 = Blueprint("api_v1", __name__, url_prefix="/api/v1")

    # Resolve the caller once per request through the configured identity
    # providers; handlers read it back with current_caller()/require_*().
    @api_v1.before_request
    def _load_caller():
        g.caller = resolve_caller(request)

    # Mount feature blueprints
    api_v1.register_blueprint(auth_bp)
    api_v1.register_blueprint(items_bp)
    api_v1.register_blueprint(claims_bp)
    api_v1.register_blueprint(notifications_bp)
    api_v1.register_blueprint(analytics_bp)
    api_v1.register_blueprint(reports_bp)

    app.register_blueprint(api_v1)
