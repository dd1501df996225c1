from celery import Celery
from kombu import Exchange, Queue
from ohw_sentinel.core.config import settings


celery_app = Celery(
    "registrations",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

exchange = Exchange(settings.CELERY_TASK_QUEUE, type="direct", durable=True)

celery_app.conf.update(
    task_acks_late=True,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    worker_prefetch_multiplier=1,
    worker_concurrency=settings.WORKER_CONCURRENCY,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_default_queue=settings.CELERY_TASK_QUEUE,
    task_default_exchange=settings.CELERY_TASK_QUEUE,
    task_default_routing_key=settings.CELERY_TASK_QUEUE,
    include=["ohw_sentinel.registrations.tasks"],
    task_queues=(
        Queue(settings.CELERY_TASK_QUEUE, exchange=exchange, routing_key=settings.CELERY_TASK_QUEUE, durable=True),
    ),
)
