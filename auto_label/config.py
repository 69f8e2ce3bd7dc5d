"""Flask and Celery configurations, chosen with $AUTO_LABEL_CONFIG."""

import os

REDIS_URL = os.environ.get("REDIS_URL", "redis://")


class DefaultConfig:
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "secrettoeveryone")
    GITHUB_WEBHOOKS_SECRET = os.environ.get("GITHUB_WEBHOOKS_SECRET")
    # Task results are report dicts.
    CELERY_ACCEPT_CONTENT = ["json"]
    CELERY_TASK_SERIALIZER = "json"
    CELERY_RESULT_SERIALIZER = "json"
    CELERY_EAGER_PROPAGATES = True
    BROKER_URL = REDIS_URL
    CELERY_RESULT_BACKEND = REDIS_URL


class WorkerConfig(DefaultConfig):
    CELERY_IMPORTS = (
        'auto_label.tasks.labeling',
    )


class TestingConfig(DefaultConfig):
    TESTING = True
    GITHUB_WEBHOOKS_SECRET = "webhook-test-secret"
