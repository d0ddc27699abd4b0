from datetime import date

from flask import Blueprint, Response, current_app

from ...security import require_staff
from .service import build_items_csv

bp = Blueprint("reports", __name__, url_prefix="/reports")


@bp.get("/items.csv")
def export_items():
    caller = require_staff()
    content = build_items_csv(current_app.config.get("REPORT_DATE_FORMAT", "%Y-%m-%d"))
    current_app.logger.info("Item report exported by staff %s", caller.id)
    filename = f"lost-found-report-{date.today().isoformat()}.csv"
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
