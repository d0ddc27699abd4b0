from flask import Blueprint, jsonify

from ...security import require_staff
from .service import get_analytics

bp = Blueprint("analytics", __name__, url_prefix="/analytics")


@bp.get("")
def analytics():
    require_staff()
    return jsonify(get_analytics())
