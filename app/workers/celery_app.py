from celery import Celery
from app.core.config import settings

celery_app = Celery("hayatos", broker=settings.REDIS_URL, backend=settings.REDIS_URL, include=["app.workers.tasks.exports"])

celery_app.conf.task_acks_late = True
celery_app.conf.task_reject_on_worker_lost = True
celery_app.conf.worker_prefetch_multiplier = 1
celery_app.conf.task_always_eager = settings.EXPORT_TASK_ALWAYS_EAGER
celery_app.conf.timezone = "UTC"

celery_app.conf.beat_schedule = {
    "requeue_pending_exports": {"task": "app.workers.tasks.exports.requeue_pending_exports", "schedule": 600.0},
}
