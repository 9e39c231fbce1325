from celery import Celery
from kombu import Exchange, Queue
from .config import settings


celery_app = Celery(
    "reminders",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND or None,
)

exchange = Exchange(settings.TASK_EXCHANGE, type="direct", durable=True)

celery_app.conf.update(
    task_acks_late=True,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    worker_prefetch_multiplier=1,
    worker_concurrency=settings.WORKER_CONCURRENCY,
    enable_utc=True,
    timezone="UTC",
    task_default_queue=settings.TASK_QUEUE,
    task_default_exchange=settings.TASK_EXCHANGE,
    task_default_routing_key=settings.TASK_ROUTING_KEY,
    include=["order_reminders.reminders.tasks"],
    task_queues=(
        Queue(settings.TASK_QUEUE, exchange=exchange, routing_key=settings.TASK_ROUTING_KEY, durable=True),
    ),
)

# Celery Beat schedule for the periodic tick
celery_app.conf.beat_schedule = {
    "reconcile-reminders": {
        "task": "reminders.reconcile",
        "schedule": settings.RECONCILE_INTERVAL_SECONDS,
    },
}

# Ensure tasks are registered when worker starts
from . import tasks as _tasks  # noqa: E402,F401
