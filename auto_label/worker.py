"""
Celery can't take a factory function as the application instance, so this
module builds one:

  $ celery --app=auto_label.worker:application worker
"""

from auto_label import create_celery_app

application = create_celery_app(config="worker")
