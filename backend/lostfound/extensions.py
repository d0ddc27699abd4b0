from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
import os

db = SQLAlchemy()
migrate = Migrate()


def _cors_origins() -> list[str]:
	"""Origins from CORS_ALLOW_ORIGINS (comma-separated); local dev servers otherwise."""
	raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
	origins = [o.strip() for o in raw.split(",") if o.strip()]
	if origins or os.getenv("FLASK_ENV", "development").lower() == "production":
		return origins
	return [
		"http://localhost:5173",
		"http://127.0.0.1:5173",
		"http://localhost:5000",
		"http://127.0.0.1:5000",
	]


_origins = _cors_origins()
# Identity headers must be allowed through preflight for the token and dev providers
cors = CORS(
	resources={r"/api/*": {"origins": _origins}, r"/uploads/*": {"origins": _origins}},
	allow_headers=["Content-Type", "Authorization", "X-User-Id"],
	expose_headers=["Content-Disposition"],
)
