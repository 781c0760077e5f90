import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'parkpool_backend.settings')

app = Celery('parkpool_backend')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
