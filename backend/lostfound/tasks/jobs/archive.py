import logging

from lostfound import create_app
from lostfound.modules.items.service import archive_old_items as _archive_old_items
from lostfound.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="lostfound.tasks.jobs.archive.archive_old_items")
def archive_old_items(days_old: int | None = None) -> int:
    app = create_app()
    with app.app_context():
        threshold = days_old if days_old is not None else int(app.config["ARCHIVE_AFTER_DAYS"])
        count = _archive_old_items(threshold)
    logger.info("Scheduled archive sweep archived %s items", count)
    return count
