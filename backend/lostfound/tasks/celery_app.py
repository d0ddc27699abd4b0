import os
from celery import Celery
from celery.schedules import crontab


def make_celery() -> Celery:
    broker = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    backend = os.getenv("CELERY_RESULT_BACKEND", broker)
    app = Celery("lostfound", broker=broker, backend=backend, include=[
        "lostfound.tasks.jobs.archive",
    ])
    app.conf.update(task_track_started=True)
    # Nightly archive sweep
    app.conf.beat_schedule = {
        "archive-old-items": {
            "task": "lostfound.tasks.jobs.archive.archive_old_items",
            "schedule": crontab(hour=3, minute=0),
        },
    }
    return app

celery_app = make_celery()
